import os
import cv2
import logging
from collections import namedtuple

from fisherblur.config import (FACES_DIR, REFERENCE_IMAGE_TEMPLATE, TEST_BLUR_KERNEL,
                               TEST_IMAGE_TEMPLATE, TEST_IMAGES_DIR)
from fisherblur.exceptions import SampleImageError

logger = logging.getLogger(__name__)


class PredictionResult(namedtuple('PredictionResult', ['predicted', 'actual', 'distance'])):
    """Label returned by the model next to the label the user expected."""

    @property
    def message(self):
        actual = "unknown" if self.actual is None else self.actual
        return f"Predicted class = {self.predicted} / Actual class = {actual}."


class FacePredictor:
    """
    Labels a held-out face with a trained model after blurring it.
    """

    def __init__(self, model, blur_kernel=TEST_BLUR_KERNEL, test_dir=TEST_IMAGES_DIR,
                 faces_dir=FACES_DIR, display=False):
        """
        Initialize the face predictor.

        Args:
            model: Trained FisherFaceModel instance
            blur_kernel (int): Gaussian kernel size applied before predicting
            test_dir (str): Directory holding the numbered test images
            faces_dir (str): Directory holding one sub-directory of faces per label
            display (bool): Show the test sample and the best match in windows
        """
        self.model = model
        self.blur_kernel = blur_kernel
        self.test_dir = test_dir
        self.faces_dir = faces_dir
        self.display = display

    def test_image_path(self, number):
        """Path of the numbered test image, e.g. ``imagesTest/3.jpg``."""
        return os.path.join(self.test_dir, TEST_IMAGE_TEMPLATE.format(label=number))

    def reference_image_path(self, label):
        """Path of the first training face of a label, e.g. ``faces/3/3.1.jpg``."""
        return os.path.join(self.faces_dir, REFERENCE_IMAGE_TEMPLATE.format(label=label))

    def load_test_image(self, image_path):
        """
        Read the test image in grayscale.

        Raises:
            SampleImageError: If the file is missing or cannot be decoded
        """
        image = cv2.imread(image_path, cv2.IMREAD_GRAYSCALE)
        if image is None:
            raise SampleImageError(f"Image not found: {image_path}")
        return image

    def blur(self, image):
        return cv2.GaussianBlur(image, (self.blur_kernel, self.blur_kernel), 0)

    def predict_image(self, image, actual_label=None):
        """
        Blur an already decoded image and predict its label.

        Returns:
            PredictionResult
        """
        blurred = self.blur(image)
        predicted, distance = self.model.predict(blurred)
        return PredictionResult(predicted, actual_label, distance)

    def predict_file(self, image_path, actual_label=None):
        """
        Load, blur and label a test image.

        Args:
            image_path (str): Path to the test image
            actual_label (int): Label the image really belongs to, if known

        Returns:
            PredictionResult
        """
        image = self.load_test_image(image_path)
        blurred = self.blur(image)
        predicted, distance = self.model.predict(blurred)
        result = PredictionResult(predicted, actual_label, distance)

        logger.info(f"Predicted label {predicted} for {image_path} (distance {distance:.2f})")

        if self.display:
            self.show_result(image, blurred, result)

        return result

    def show_result(self, original, blurred, result):
        """Show the blurred sample, the original and a face of the predicted label."""
        cv2.imshow("Blurred test sample", blurred)
        cv2.imshow("Original input image before blur", original)

        reference_path = self.reference_image_path(result.predicted)
        reference = cv2.imread(reference_path, cv2.IMREAD_GRAYSCALE)
        if reference is None:
            logger.warning(f"No reference image for label {result.predicted}: {reference_path}")
            return
        cv2.imshow("Image of predicted label", reference)
