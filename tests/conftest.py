import os
import cv2
import numpy as np
import pytest

FACE_SIZE = 48


def create_face(label, size=FACE_SIZE, seed=0):
    """Synthetic grayscale 'face': a gradient whose direction depends on the label, plus noise."""
    rng = np.random.default_rng(seed)
    ramp = np.linspace(0, 200, size)
    if label % 2 == 0:
        base = np.tile(ramp, (size, 1))
    else:
        base = np.tile(ramp[:, None], (1, size))
    noise = rng.integers(0, 55, (size, size))
    return (base + noise).astype(np.uint8)


def write_face(directory, name, label, seed=0):
    """Write a synthetic face as PNG and return its path."""
    path = os.path.join(str(directory), name)
    cv2.imwrite(path, create_face(label, seed=seed))
    return path


def write_csv(path, rows, separator=';'):
    with open(path, 'w') as f:
        for row in rows:
            f.write(separator.join(str(field) for field in row) + '\n')
    return str(path)


@pytest.fixture
def faces_csv(tmp_path):
    """CSV with one face of label 0 and one face of label 1."""
    face0 = write_face(tmp_path, 'face0.png', 0, seed=1)
    face1 = write_face(tmp_path, 'face1.png', 1, seed=2)
    return write_csv(tmp_path / 'faces.csv', [(face0, 0), (face1, 1)])


@pytest.fixture
def training_set(faces_csv):
    """Augmented images and labels loaded from ``faces_csv``."""
    from fisherblur.dataset import DatasetLoader
    return DatasetLoader().load(faces_csv)


@pytest.fixture
def trained_model(training_set):
    from fisherblur.train import FisherFaceModel
    images, labels = training_set
    model = FisherFaceModel()
    model.train(images, labels)
    return model
