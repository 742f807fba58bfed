"""Image reconciliation for product create/update.

Diffs a product's stored image references against a submitted image list:
inline payloads are uploaded, hosted references pass through, and stored
references missing from the result are scheduled for deletion.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from laptop_catalog.clients.image_storage import ImageStorage
from laptop_catalog.models import HostedImage, ImageRef, InlineImage

logger = logging.getLogger(__name__)


class ImageUploadError(Exception):
    """Raised when one or more inline images could not be uploaded."""

    pass


@dataclass(frozen=True)
class ReconciliationResult:
    """Outcome of reconciling stored and submitted images."""

    to_upload: List[InlineImage]
    final_refs: List[str]
    to_delete: List[str]
    uploaded: List[str] = field(default_factory=list)


def pending_uploads(submitted: Sequence[ImageRef]) -> List[InlineImage]:
    """Inline payloads in submission order."""
    return [image for image in submitted if isinstance(image, InlineImage)]


def images_to_delete(existing: Sequence[str], final_refs: Sequence[str]) -> List[str]:
    """Stored references that are no longer part of the product."""
    kept = set(final_refs)
    return [reference for reference in existing if reference not in kept]


async def delete_images(storage: ImageStorage, references: Sequence[str]) -> List[str]:
    """
    Delete hosted images, tolerating individual failures.

    Missing objects are already handled as success by the storage layer.
    Any other failure is logged and does not propagate.

    Args:
        storage: Object storage holding the images.
        references: Hosted references to delete.

    Returns:
        The references whose deletion failed.
    """
    if not references:
        return []

    results = await asyncio.gather(
        *(storage.delete(reference) for reference in references),
        return_exceptions=True,
    )

    failed = []
    for reference, result in zip(references, results):
        if isinstance(result, Exception):
            logger.warning(f"Failed to delete image from storage: {reference}: {result}")
            failed.append(reference)

    return failed


async def reconcile(
    existing: Sequence[str],
    submitted: Sequence[ImageRef],
    storage: ImageStorage,
    product_id: str,
) -> ReconciliationResult:
    """
    Upload new images and compute the product's final image list.

    Uploads run concurrently. Each uploaded reference takes the position of
    its payload, so ``final_refs`` follows the submission order. Nothing is
    deleted here; the caller removes ``to_delete`` once the record is saved.

    Args:
        existing: Hosted references currently stored on the product.
        submitted: Images from the form, already classified.
        storage: Object storage used for uploads.
        product_id: Product the images belong to.

    Returns:
        ReconciliationResult with uploads, final references and deletions.

    Raises:
        ImageUploadError: If any upload fails. Images uploaded by the same
            call are removed again before raising.
    """
    to_upload = pending_uploads(submitted)

    results = await asyncio.gather(
        *(storage.upload(image, product_id) for image in to_upload),
        return_exceptions=True,
    )

    errors = [result for result in results if isinstance(result, BaseException)]
    if errors:
        uploaded = [result for result in results if isinstance(result, str)]
        await delete_images(storage, uploaded)
        raise ImageUploadError(
            f"Failed to upload {len(errors)} of {len(to_upload)} images for product {product_id}"
        ) from errors[0]

    uploaded = list(results)
    uploaded_refs = iter(uploaded)
    final_refs = [
        image.reference if isinstance(image, HostedImage) else next(uploaded_refs)
        for image in submitted
    ]

    logger.debug(
        f"Reconciled images for product {product_id}: "
        f"{len(to_upload)} uploaded, {len(final_refs)} kept"
    )

    return ReconciliationResult(
        to_upload=to_upload,
        final_refs=final_refs,
        to_delete=images_to_delete(existing, final_refs),
        uploaded=uploaded,
    )
