import logging
from collections import namedtuple

from sklearn.metrics import accuracy_score, confusion_matrix

from fisherblur.config import CSV_SEPARATOR, TEST_BLUR_KERNEL
from fisherblur.dataset import read_csv
from fisherblur.recognize import FacePredictor

logger = logging.getLogger(__name__)

EvaluationReport = namedtuple(
    'EvaluationReport', ['accuracy', 'confusion_matrix', 'labels', 'y_true', 'y_pred'])


def evaluate(model, csv_path, separator=CSV_SEPARATOR, blur_kernel=TEST_BLUR_KERNEL):
    """
    Label every image of a held-out CSV and score the predictions.

    The images are blurred with the same kernel as the single test sample
    but are not augmented.

    Args:
        model: Trained FisherFaceModel instance
        csv_path (str): ``path<separator>label`` file of held-out faces
        separator (str): CSV field separator
        blur_kernel (int): Gaussian kernel size applied before predicting

    Returns:
        EvaluationReport, or None when the CSV lists no readable image
    """
    images, y_true = read_csv(csv_path, separator)
    if not images:
        logger.warning(f"No images to evaluate in {csv_path}")
        return None

    predictor = FacePredictor(model, blur_kernel=blur_kernel)
    y_pred = [predictor.predict_image(image, label).predicted
              for image, label in zip(images, y_true)]

    labels = sorted(set(y_true) | set(y_pred))
    accuracy = accuracy_score(y_true, y_pred)
    matrix = confusion_matrix(y_true, y_pred, labels=labels)

    logger.info(f"Accuracy on {len(images)} held-out images: {accuracy:.2%}")
    logger.info(f"Confusion matrix (labels {labels}):\n{matrix}")

    return EvaluationReport(accuracy, matrix, labels, y_true, y_pred)
