import os
import sys
import cv2
import logging
import numpy as np

from fisherblur.config import MIN_TRAINING_IMAGES
from fisherblur.exceptions import InsufficientDataError, SampleImageError, TrainingError
from fisherblur.utils import ensure_directory

logger = logging.getLogger(__name__)


class FisherFaceModel:
    """
    Fisherfaces (LDA) face recognizer backed by OpenCV's contrib face module.
    """

    def __init__(self, num_components=0, threshold=sys.float_info.max):
        """
        Initialize the face recognition model.

        Args:
            num_components (int): Fisherfaces to keep, 0 keeps C - 1 for C classes
            threshold (float): Distance above which OpenCV answers -1
        """
        self.num_components = num_components
        self.threshold = threshold
        self.recognizer = None
        self.labels = []

    def _create_recognizer(self):
        return cv2.face.FisherFaceRecognizer_create(self.num_components, self.threshold)

    @property
    def is_trained(self):
        return self.recognizer is not None

    def train(self, images, labels):
        """
        Fit the recognizer on the whole labeled set in one batch call.

        Args:
            images (list): Grayscale images, all of the same size
            labels (list): Integer label for each image

        Raises:
            InsufficientDataError: If fewer than two images are given
            TrainingError: If OpenCV rejects the data
        """
        if len(images) < MIN_TRAINING_IMAGES:
            raise InsufficientDataError("Needs at least 2 images to work. "
                                        "Please add more images to your data set!")

        recognizer = self._create_recognizer()
        logger.info(f"Training face recognizer model on {len(images)} images, "
                    f"it might take few minutes ...")
        try:
            recognizer.train(images, np.asarray(labels, dtype=np.int32))
        except cv2.error as e:
            raise TrainingError(f"OpenCV could not train the model: {e}") from e

        self.recognizer = recognizer
        self.labels = sorted(set(int(label) for label in labels))
        logger.info(f"Training done, {len(self.labels)} classes, "
                    f"{self.eigenvectors().shape[1]} fisherfaces")

    def _require_trained(self):
        if self.recognizer is None:
            raise TrainingError("No model trained or loaded")

    def predict(self, image):
        """
        Predict the label of a face.

        Args:
            image: Grayscale image of the training size

        Returns:
            tuple: (predicted_label, distance)

        Raises:
            SampleImageError: If OpenCV rejects the image, e.g. a size other than
                the training size
        """
        self._require_trained()
        try:
            label, distance = self.recognizer.predict(image)
        except cv2.error as e:
            raise SampleImageError(f"OpenCV could not label the image: {e}") from e
        return int(label), float(distance)

    def eigenvalues(self):
        self._require_trained()
        return np.asarray(self.recognizer.getEigenValues()).ravel()

    def eigenvectors(self):
        """Fisherface basis, one column per component."""
        self._require_trained()
        return np.asarray(self.recognizer.getEigenVectors())

    def mean(self):
        self._require_trained()
        return np.asarray(self.recognizer.getMean()).ravel()

    def save_model(self, model_path):
        """
        Save the trained model as OpenCV YAML.

        Returns:
            bool: True if saving was successful, False otherwise
        """
        if self.recognizer is None:
            logger.error("No model to save")
            return False

        try:
            model_dir = os.path.dirname(model_path)
            if model_dir:
                ensure_directory(model_dir)
            self.recognizer.write(model_path)
            logger.info(f"Model saved to {model_path}")
            return True

        except Exception as e:
            logger.error(f"Error saving model: {e}")
            return False

    def load_model(self, model_path):
        """
        Load a model written by :meth:`save_model`.

        Returns:
            bool: True if loading was successful, False otherwise
        """
        if not os.path.exists(model_path):
            logger.error(f"Model file not found: {model_path}")
            return False

        try:
            recognizer = self._create_recognizer()
            recognizer.read(model_path)
        except cv2.error as e:
            logger.error(f"Error loading model: {e}")
            return False

        self.recognizer = recognizer
        self.labels = sorted(set(int(label) for label in np.asarray(recognizer.getLabels()).ravel()))
        logger.info(f"Model loaded from {model_path}")
        return True
