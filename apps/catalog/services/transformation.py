"""
Maps an image variant kind to the transformation the image CDN should apply.

The CDN expects every numeric parameter as a string, so descriptors carry
width and height already stringified.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional
from urllib.parse import quote

from django.conf import settings

from apps.catalog.exceptions import ConfigurationError
from apps.catalog.variants import VariantCatalog, VariantDefinition, VariantKind, get_variant_catalog

logger = logging.getLogger(__name__)

DEFAULT_KIND = VariantKind.SQUARE


class CropMode(str, Enum):
    EXTRACT = 'extract'


class Focus(str, Enum):
    CENTER = 'center'


@dataclass(frozen=True)
class TransformationDescriptor:
    width: str
    height: str
    crop_mode: CropMode = CropMode.EXTRACT
    focus: Focus = Focus.CENTER

    def as_dict(self):
        """Shape sent to the CDN."""
        return {
            'width': self.width,
            'height': self.height,
            'cropMode': self.crop_mode.value,
            'focus': self.focus.value,
        }

    def as_url_param(self):
        return f"w-{self.width},h-{self.height},cm-{self.crop_mode.value},fo-{self.focus.value}"


def resolve_definition(kind=None, catalog: Optional[VariantCatalog] = None) -> VariantDefinition:
    """
    Definition for ``kind``, SQUARE when ``kind`` is None.

    An unknown kind (legacy or malformed data) falls back to SQUARE so the
    image still renders; the fallback is logged once per call.
    """
    catalog = catalog or get_variant_catalog()
    if kind is None:
        return catalog.lookup(DEFAULT_KIND)
    try:
        return catalog.lookup(kind)
    except ConfigurationError:
        logger.warning("Unknown image variant %r, falling back to %s", kind, DEFAULT_KIND)
        return catalog.lookup(DEFAULT_KIND)


def transformation_for(definition: VariantDefinition) -> List[TransformationDescriptor]:
    return [
        TransformationDescriptor(
            width=str(definition.dimensions.width),
            height=str(definition.dimensions.height),
        )
    ]


def resolve(kind=None, catalog: Optional[VariantCatalog] = None) -> List[TransformationDescriptor]:
    return transformation_for(resolve_definition(kind, catalog))


def build_image_url(path, transformation: List[TransformationDescriptor], endpoint=None):
    """
    CDN URL for ``path`` with ``transformation`` applied.

    Relative paths get a ``tr:`` path segment; absolute source URLs get a
    ``tr`` query parameter instead.
    """
    chain = ':'.join(step.as_url_param() for step in transformation)
    if path.startswith(('http://', 'https://')):
        separator = '&' if '?' in path else '?'
        return f"{path}{separator}tr={quote(chain, safe=',:-')}"

    endpoint = (endpoint or settings.IMAGE_CDN_URL_ENDPOINT).rstrip('/')
    return f"{endpoint}/tr:{chain}/{path.lstrip('/')}"
