import sys
import argparse
import cv2

from fisherblur import config
from fisherblur.utils import setup_logger
from fisherblur.dataset import DatasetLoader
from fisherblur.train import FisherFaceModel
from fisherblur.recognize import FacePredictor
from fisherblur.visualize import FisherfaceVisualizer
from fisherblur.evaluate import evaluate
from fisherblur.exceptions import FisherBlurError, SampleImageError, TrainingError


def build_parser():
    parser = argparse.ArgumentParser(
        prog='fisherblur',
        description='Train a Fisherfaces model on blurred faces and label a test image')

    parser.add_argument('csv', nargs='?',
                        help='CSV file listing <image path><separator><label>')
    parser.add_argument('output_folder', nargs='?',
                        help='Save the visualization images here instead of showing them')
    parser.add_argument('--separator', type=str, default=config.CSV_SEPARATOR,
                        help=f'CSV field separator (default: {config.CSV_SEPARATOR})')
    parser.add_argument('--workers', type=int, default=1,
                        help='Threads used to blur the training images (default: 1)')
    parser.add_argument('--dataset-cache', type=str,
                        help='H5 file caching the augmented training set')

    # Model arguments
    parser.add_argument('--num-components', type=int, default=0,
                        help='Fisherfaces to keep, 0 keeps classes - 1 (default: 0)')
    parser.add_argument('--save-model', type=str,
                        help='Write the trained model to this YAML file')
    parser.add_argument('--load-model', type=str,
                        help='Load a model from this YAML file instead of training')

    # Prediction arguments
    parser.add_argument('--test-image', type=str,
                        help='Path to the image to label')
    parser.add_argument('--test-label', type=int,
                        help=f'Actual label of the test image; without --test-image, '
                             f'selects {config.TEST_IMAGES_DIR}/<label>.jpg')
    parser.add_argument('--test-dir', type=str, default=config.TEST_IMAGES_DIR,
                        help=f'Directory of numbered test images (default: {config.TEST_IMAGES_DIR})')
    parser.add_argument('--faces-dir', type=str, default=config.FACES_DIR,
                        help=f'Directory of reference faces per label (default: {config.FACES_DIR})')
    parser.add_argument('--eval-csv', type=str,
                        help='CSV of held-out faces to compute accuracy on')

    # Display arguments
    parser.add_argument('--visualize', action='store_true',
                        help='Render the mean face, fisherfaces and reconstructions')
    parser.add_argument('--no-display', action='store_true',
                        help='Never open image windows')
    parser.add_argument('--log-dir', type=str, default=config.LOG_DIR,
                        help=f'Directory for log files (default: {config.LOG_DIR})')
    return parser


def choose_test_image(args, predictor):
    """Return (image path, actual label) from the arguments, asking on stdin if needed."""
    if args.test_image:
        return args.test_image, args.test_label

    number = args.test_label
    if number is None:
        try:
            answer = input("Choose the image to label (int between 0 & 5): ")
        except EOFError:
            raise SampleImageError("No image number given on stdin") from None
        try:
            number = int(answer)
        except ValueError:
            raise SampleImageError(f"Not an image number: {answer!r}") from None

    return predictor.test_image_path(number), number


def run(args, logger):
    display = not args.no_display and args.output_folder is None

    loader = DatasetLoader(separator=args.separator, workers=args.workers,
                           cache_file=args.dataset_cache)
    images, labels = loader.load(args.csv)

    model = FisherFaceModel(num_components=args.num_components)
    if args.load_model:
        if not model.load_model(args.load_model):
            raise TrainingError(f"Could not load model from {args.load_model}")
    else:
        model.train(images, labels)

    if args.save_model and not model.save_model(args.save_model):
        raise TrainingError(f"Could not save model to {args.save_model}")

    predictor = FacePredictor(model, test_dir=args.test_dir, faces_dir=args.faces_dir,
                              display=display)
    image_path, actual_label = choose_test_image(args, predictor)
    result = predictor.predict_file(image_path, actual_label)
    print(result.message)

    if args.visualize or args.output_folder:
        if not images:
            logger.warning("No training image to visualize")
        elif args.output_folder is None and not display:
            logger.warning("Visualization needs an output folder when windows are disabled")
        else:
            visualizer = FisherfaceVisualizer(model, output_dir=args.output_folder)
            visualizer.render(images[0])
            visualizer.plot_eigenvalues()

    if args.eval_csv:
        report = evaluate(model, args.eval_csv, separator=args.separator)
        if report is not None:
            print(f"Accuracy = {report.accuracy:.2%} on {len(report.y_true)} images.")

    if display:
        cv2.waitKey(0)
        cv2.destroyAllWindows()

    return 0


def main(argv=None):
    """
    Main entry point: load, augment, train, predict and optionally visualize.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.csv is None:
        parser.print_usage()
        return 1

    logger = setup_logger(args.log_dir)

    try:
        return run(args, logger)
    except FisherBlurError as e:
        logger.error(str(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())
