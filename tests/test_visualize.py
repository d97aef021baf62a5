import os
import cv2
import numpy as np

from fisherblur.visualize import FisherfaceVisualizer, norm_0_255


def test_norm_single_channel():
    image = np.array([[-2.0, 0.5], [3.0, 8.0]])

    normalized = norm_0_255(image)

    assert normalized.dtype == np.uint8
    assert normalized.min() == 0
    assert normalized.max() == 255
    assert normalized[0, 0] == 0
    assert normalized[1, 1] == 255


def test_norm_three_channels():
    image = np.random.default_rng(0).uniform(-1, 1, (6, 5, 3))

    normalized = norm_0_255(image)

    assert normalized.shape == (6, 5, 3)
    assert normalized.min() == 0
    assert normalized.max() == 255


def test_norm_other_channel_counts_pass_through():
    image = np.random.default_rng(1).uniform(0, 1, (4, 4, 4))

    normalized = norm_0_255(image)

    np.testing.assert_array_equal(normalized, image)
    assert normalized is not image


def test_render_writes_images(trained_model, training_set, tmp_path):
    images, _ = training_set
    output_dir = str(tmp_path / 'out')

    written = FisherfaceVisualizer(trained_model, output_dir=output_dir).render(images[0])

    names = sorted(os.path.basename(path) for path in written)
    assert names == ['fisherface_0.png', 'fisherface_reconstruction_0.png', 'mean.png']

    mean = cv2.imread(os.path.join(output_dir, 'mean.png'), cv2.IMREAD_UNCHANGED)
    assert mean.shape == images[0].shape
    fisherface = cv2.imread(os.path.join(output_dir, 'fisherface_0.png'), cv2.IMREAD_UNCHANGED)
    assert fisherface.shape == images[0].shape + (3,)


def test_render_caps_component_count(trained_model, training_set, tmp_path):
    images, _ = training_set

    written = FisherfaceVisualizer(trained_model, output_dir=str(tmp_path),
                                   max_components=0).render(images[0])

    assert [os.path.basename(path) for path in written] == ['mean.png']


def test_render_display_mode(trained_model, training_set, monkeypatch):
    shown = []
    monkeypatch.setattr(cv2, 'imshow', lambda name, image: shown.append(name))
    images, _ = training_set

    written = FisherfaceVisualizer(trained_model).render(images[0])

    assert written == []
    assert shown == ['mean', 'fisherface_0', 'fisherface_reconstruction_0']


def test_plot_eigenvalues(trained_model, tmp_path):
    visualizer = FisherfaceVisualizer(trained_model, output_dir=str(tmp_path))

    plot_path = visualizer.plot_eigenvalues()

    assert plot_path == os.path.join(str(tmp_path), 'eigenvalues.png')
    assert os.path.exists(plot_path)
    assert FisherfaceVisualizer(trained_model).plot_eigenvalues() is None
