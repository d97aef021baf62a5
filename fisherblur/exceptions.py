class FisherBlurError(Exception):
    """Base class for every error the pipeline reports to the user."""


class DatasetError(FisherBlurError, IOError):
    """The CSV file or the dataset cache could not be read."""


class InsufficientDataError(FisherBlurError, ValueError):
    """Not enough images to fit a Fisherfaces model."""


class TrainingError(FisherBlurError, ValueError):
    """OpenCV rejected the training data, or the model was used before training."""


class SampleImageError(FisherBlurError, IOError):
    """The image to label is missing or cannot be decoded."""
