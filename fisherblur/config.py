# fisherblur/config.py
# Defaults shared by the CLI and the pipeline classes. Every value here can be
# overridden from the command line or a constructor keyword.
import cv2

CSV_SEPARATOR = ';'

# Blur levels added for every training image: 11, 21, 31, 41
BLUR_KERNEL_SIZES = tuple(range(11, 51, 10))
TEST_BLUR_KERNEL = 41

TEST_IMAGES_DIR = 'imagesTest'
TEST_IMAGE_TEMPLATE = '{label}.jpg'
FACES_DIR = 'faces'
REFERENCE_IMAGE_TEMPLATE = '{label}/{label}.1.jpg'

MAX_VISUALIZED_COMPONENTS = 16
FISHERFACE_COLORMAP = cv2.COLORMAP_BONE

LOG_DIR = 'logs'
MIN_TRAINING_IMAGES = 2
