import os
import logging
import datetime
import h5py
import numpy as np

from fisherblur.config import LOG_DIR

# Configure logging
def setup_logger(log_dir=LOG_DIR, name='fisherblur'):
    """Set up and configure logger for the application."""
    logger = logging.getLogger(name)

    # Already configured by an earlier call
    if logger.handlers:
        return logger

    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f'{name}_{timestamp}.log')

    logger.setLevel(logging.INFO)

    # File handler
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.INFO)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)

    # Format
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    # Add handlers
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger

logger = logging.getLogger(__name__)

# Create directories if they don't exist
def ensure_directory(directory):
    """Ensure directory exists, create if it doesn't."""
    if not os.path.exists(directory):
        os.makedirs(directory)
        logger.info(f"Created directory: {directory}")

# Save augmented training set to H5 file
def save_to_h5(images, labels, file_path, attrs=None):
    """Save images and labels to H5 file.

    All images must share the same size, which Fisherfaces requires anyway.
    ``attrs`` are stored on the file root and read back with ``load_h5_attrs``.
    """
    try:
        with h5py.File(file_path, 'w') as h5f:
            h5f.create_dataset('images', data=np.stack(images).astype(np.uint8),
                               compression='gzip')
            h5f.create_dataset('labels', data=np.asarray(labels, dtype=np.int32))
            for key, value in (attrs or {}).items():
                h5f.attrs[key] = value

        logger.info(f"Dataset saved to {file_path}")
        return True
    except Exception as e:
        logger.error(f"Error saving H5 file: {e}")
        return False

# Load augmented training set from H5 file
def load_from_h5(file_path):
    """Load images and labels from H5 file.

    Returns:
        tuple: (list of images, list of int labels), or (None, None) on failure
    """
    try:
        with h5py.File(file_path, 'r') as h5f:
            images = [img for img in h5f['images'][:]]
            labels = [int(label) for label in h5f['labels'][:]]

        logger.info(f"Dataset loaded from {file_path}")
        return images, labels
    except Exception as e:
        logger.error(f"Error loading H5 file: {e}")
        return None, None

# Read the attributes stored by save_to_h5
def load_h5_attrs(file_path):
    """Return the root attributes of an H5 file as a dict, or None on failure."""
    try:
        with h5py.File(file_path, 'r') as h5f:
            return dict(h5f.attrs)
    except Exception as e:
        logger.error(f"Error reading H5 attributes: {e}")
        return None
