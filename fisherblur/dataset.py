import os
import re
import cv2
import logging
from concurrent.futures import ThreadPoolExecutor

from fisherblur.config import BLUR_KERNEL_SIZES, CSV_SEPARATOR
from fisherblur.exceptions import DatasetError
from fisherblur.utils import load_from_h5, load_h5_attrs, save_to_h5

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'\s*([+-]?\d+)')


def parse_label(text):
    """Parse a label the way C atoi does: leading integer, 0 if there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_csv_line(line, separator=CSV_SEPARATOR):
    """
    Split one CSV line into (path, label) at the first separator.

    The path is kept verbatim, only the line ending is dropped; the label is
    stripped before parsing.

    Returns:
        tuple: (path, int label), or None when the path or label field is blank
    """
    path, _, label = line.rstrip('\r\n').partition(separator)
    label = label.strip()
    if not path or not label:
        return None
    return path, parse_label(label)


def blur_images(image, label, kernel_sizes=BLUR_KERNEL_SIZES):
    """
    Produce blurred copies of an image, one per kernel size.

    Args:
        image: Grayscale source image (left untouched)
        label (int): Label shared by every copy
        kernel_sizes: Odd square kernel sizes, in emission order

    Returns:
        list: (blurred_image, label) pairs in the order of ``kernel_sizes``
    """
    return [(cv2.GaussianBlur(image, (k, k), 0), label) for k in kernel_sizes]


def augment_dataset(images, labels, kernel_sizes=BLUR_KERNEL_SIZES, workers=1):
    """
    Expand every (image, label) pair into the original followed by its blurred copies.

    Each source image is independent, so with ``workers > 1`` the blurs run on a
    thread pool. Output order is the same either way.
    """
    def _expand(pair):
        image, label = pair
        return [(image, label)] + blur_images(image, label, kernel_sizes)

    pairs = list(zip(images, labels))
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            groups = list(executor.map(_expand, pairs))
    else:
        groups = [_expand(pair) for pair in pairs]

    out_images, out_labels = [], []
    for group in groups:
        for image, label in group:
            out_images.append(image)
            out_labels.append(label)
    return out_images, out_labels


def read_csv(filename, separator=CSV_SEPARATOR):
    """
    Read every image listed in a ``path<separator>label`` file, in grayscale.

    Lines with an empty path or label are skipped silently. Images OpenCV
    cannot decode are skipped with a warning.

    Args:
        filename (str): Path to the CSV file
        separator (str): Field separator

    Returns:
        tuple: (list of images, list of int labels) in file order

    Raises:
        DatasetError: If the CSV file cannot be opened
    """
    images, labels = [], []

    try:
        with open(filename, 'r') as csv_file:
            lines = csv_file.readlines()
    except OSError as e:
        raise DatasetError(f"No valid input file was given, please check the given filename: {filename}") from e

    for line in lines:
        record = parse_csv_line(line, separator)
        if record is None:
            continue

        path, label = record
        image = cv2.imread(path, cv2.IMREAD_GRAYSCALE)
        if image is None:
            logger.warning(f"Could not read image: {path}")
            continue

        images.append(image)
        labels.append(label)

    logger.info(f"Read {len(images)} images from {filename}")
    return images, labels


class DatasetLoader:
    """
    Loads the labeled training set and adds the blurred copies of each face.
    """

    def __init__(self, separator=CSV_SEPARATOR, kernel_sizes=BLUR_KERNEL_SIZES,
                 workers=1, cache_file=None):
        """
        Initialize the dataset loader.

        Args:
            separator (str): CSV field separator
            kernel_sizes: Gaussian kernel sizes used for augmentation
            workers (int): Threads used to blur the images
            cache_file (str): Optional H5 file holding an already augmented set
        """
        self.separator = separator
        self.kernel_sizes = tuple(kernel_sizes)
        self.workers = workers
        self.cache_file = cache_file

    def csv_signature(self, csv_path):
        """
        Identify the CSV a cached set was built from.

        Raises:
            DatasetError: If the CSV file cannot be opened
        """
        try:
            with open(csv_path, 'r'):
                mtime = os.path.getmtime(csv_path)
        except OSError as e:
            raise DatasetError(f"No valid input file was given, please check the given filename: {csv_path}") from e

        return {
            'csv_path': os.path.abspath(csv_path),
            'csv_mtime': mtime,
            'separator': self.separator,
            'kernel_sizes': list(self.kernel_sizes),
        }

    def _cache_matches(self, signature):
        attrs = load_h5_attrs(self.cache_file)
        if attrs is None:
            return False
        return (attrs.get('csv_path') == signature['csv_path']
                and attrs.get('csv_mtime') == signature['csv_mtime']
                and attrs.get('separator') == signature['separator']
                and [int(k) for k in attrs.get('kernel_sizes', [])] == signature['kernel_sizes'])

    def load(self, csv_path):
        """
        Load and augment the training set.

        The CSV must always be readable. A configured cache file is used
        instead of decoding the images when it was built from the same CSV
        (path and modification time) with the same separator and kernel
        sizes; otherwise the CSV is read, augmented and the cache rewritten.

        Returns:
            tuple: (images, labels) with 1 + len(kernel_sizes) entries per source

        Raises:
            DatasetError: If the CSV cannot be opened or the cache cannot be read
        """
        signature = self.csv_signature(csv_path)
        use_cache = self.cache_file is not None and os.path.exists(self.cache_file)

        if use_cache and self._cache_matches(signature):
            images, labels = load_from_h5(self.cache_file)
            if images is None:
                raise DatasetError(f"Could not read dataset cache {self.cache_file}")
            logger.info(f"Using cached training set with {len(images)} images")
            return images, labels

        if use_cache:
            logger.info(f"Dataset cache {self.cache_file} is stale, rebuilding it from {csv_path}")

        images, labels = read_csv(csv_path, self.separator)
        images, labels = augment_dataset(images, labels, self.kernel_sizes, self.workers)
        logger.info(f"Training set holds {len(images)} images after adding "
                    f"{len(self.kernel_sizes)} blur levels per face")

        if self.cache_file is not None and images:
            save_to_h5(images, labels, self.cache_file, attrs=signature)

        return images, labels
