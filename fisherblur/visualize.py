import os
import cv2
import logging
import numpy as np
import matplotlib.pyplot as plt

from fisherblur.config import FISHERFACE_COLORMAP, MAX_VISUALIZED_COMPONENTS
from fisherblur.utils import ensure_directory

logger = logging.getLogger(__name__)


def norm_0_255(image):
    """
    Min-max normalize a 1- or 3-channel image to uint8 [0, 255].

    Images with any other channel count are returned unchanged (as a copy).
    """
    channels = 1 if image.ndim == 2 else image.shape[2]
    if channels in (1, 3):
        return cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX, dtype=cv2.CV_8U)
    return image.copy()


def project(W, mean, x):
    return (x - mean) @ W


def reconstruct(W, mean, projection):
    return projection @ W.T + mean


class FisherfaceVisualizer:
    """
    Renders the mean face, the fisherfaces and single-component reconstructions.

    Images are written to ``output_dir`` when it is given, otherwise shown in
    OpenCV windows.
    """

    def __init__(self, model, output_dir=None, max_components=MAX_VISUALIZED_COMPONENTS,
                 colormap=FISHERFACE_COLORMAP):
        """
        Args:
            model: Trained FisherFaceModel instance
            output_dir (str): Folder to write PNG files to, None to display them
            max_components (int): Upper bound on fisherfaces rendered
            colormap (int): OpenCV colormap applied to the fisherfaces
        """
        self.model = model
        self.output_dir = output_dir
        self.max_components = max_components
        self.colormap = colormap

        if self.output_dir is not None:
            ensure_directory(self.output_dir)

    def _emit(self, name, image, written):
        if self.output_dir is None:
            cv2.imshow(name, image)
            return
        path = os.path.join(self.output_dir, f"{name}.png")
        cv2.imwrite(path, image)
        written.append(path)

    def render(self, first_image):
        """
        Render every artifact for a model trained on images shaped like ``first_image``.

        Args:
            first_image: First training image, used for its height and as the
                face to reconstruct

        Returns:
            list: Paths of written files, empty in display mode
        """
        height = first_image.shape[0]
        eigenvalues = self.model.eigenvalues()
        W = self.model.eigenvectors()
        mean = self.model.mean()
        written = []

        logger.info(f"Model has {W.shape[1]} fisherfaces, eigenvalues: {np.round(eigenvalues, 4)}")

        self._emit("mean", norm_0_255(mean.reshape(height, -1)), written)

        n_components = min(self.max_components, W.shape[1])
        for i in range(n_components):
            grayscale = norm_0_255(W[:, i].reshape(height, -1))
            self._emit(f"fisherface_{i}", cv2.applyColorMap(grayscale, self.colormap), written)

        x = first_image.reshape(1, -1).astype(np.float64)
        for i in range(n_components):
            w = W[:, i:i + 1]
            reconstruction = reconstruct(w, mean, project(w, mean, x))
            self._emit(f"fisherface_reconstruction_{i}",
                       norm_0_255(reconstruction.reshape(height, -1)), written)

        if written:
            logger.info(f"Saved {len(written)} images to {self.output_dir}")
        return written

    def plot_eigenvalues(self, filename='eigenvalues.png'):
        """
        Save a bar chart of the fisherface eigenvalues.

        Returns:
            str: Path of the saved plot, or None in display mode or on error
        """
        if self.output_dir is None:
            return None

        try:
            eigenvalues = self.model.eigenvalues()
            fig, ax = plt.subplots(figsize=(8, 4))
            ax.bar(range(len(eigenvalues)), eigenvalues)
            ax.set_xlabel('Fisherface')
            ax.set_ylabel('Eigenvalue')
            ax.set_title('Fisherface eigenvalues')
            fig.tight_layout()

            plot_path = os.path.join(self.output_dir, filename)
            fig.savefig(plot_path)
            plt.close(fig)
            logger.info(f"Eigenvalue plot saved to {plot_path}")
            return plot_path

        except Exception as e:
            logger.error(f"Error plotting eigenvalues: {e}")
            return None
