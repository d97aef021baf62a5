import os
import cv2
import pytest

from fisherblur.exceptions import SampleImageError
from fisherblur.recognize import FacePredictor, PredictionResult

from conftest import write_face


def test_predict_file_labels_known_face(trained_model, tmp_path):
    """Predict always answers with a label seen during training"""
    face = write_face(tmp_path, 'sample.png', 1, seed=2)

    result = FacePredictor(trained_model).predict_file(face, actual_label=1)

    assert result.predicted in trained_model.labels
    assert result.predicted == 1
    assert result.actual == 1


def test_predict_file_missing_image(trained_model, tmp_path):
    predictor = FacePredictor(trained_model)

    with pytest.raises(SampleImageError):
        predictor.predict_file(str(tmp_path / 'missing.jpg'), actual_label=0)


def test_prediction_message():
    result = PredictionResult(3, 4, 12.5)
    assert result.message == "Predicted class = 3 / Actual class = 4."


def test_prediction_message_without_actual_label():
    result = PredictionResult(3, None, 1.0)
    assert result.message == "Predicted class = 3 / Actual class = unknown."


def test_image_paths(trained_model):
    predictor = FacePredictor(trained_model, test_dir='imagesTest', faces_dir='faces')

    assert predictor.test_image_path(2) == os.path.join('imagesTest', '2.jpg')
    assert predictor.reference_image_path(5) == os.path.join('faces', '5', '5.1.jpg')


def test_display_shows_reference_face(trained_model, tmp_path, monkeypatch):
    """In display mode the blurred sample, the original and a face of the predicted label are shown"""
    shown = []
    monkeypatch.setattr(cv2, 'imshow', lambda name, image: shown.append(name))

    faces_dir = tmp_path / 'faces'
    (faces_dir / '1').mkdir(parents=True)
    write_face(faces_dir / '1', '1.1.jpg', 1)
    sample = write_face(tmp_path, 'sample.png', 1, seed=2)

    predictor = FacePredictor(trained_model, faces_dir=str(faces_dir), display=True)
    predictor.predict_file(sample, actual_label=1)

    assert shown == ["Blurred test sample", "Original input image before blur",
                     "Image of predicted label"]


def test_display_without_reference_face(trained_model, tmp_path, monkeypatch):
    shown = []
    monkeypatch.setattr(cv2, 'imshow', lambda name, image: shown.append(name))
    sample = write_face(tmp_path, 'sample.png', 0, seed=1)

    predictor = FacePredictor(trained_model, faces_dir=str(tmp_path / 'none'), display=True)
    result = predictor.predict_file(sample)

    assert result.actual is None
    assert len(shown) == 2
