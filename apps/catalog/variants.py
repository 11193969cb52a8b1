"""
Variant catalog: the closed set of image variant kinds a product can be sold
in, with their display label and target pixel dimensions.
"""

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType

from django.conf import settings
from django.core.signals import setting_changed
from django.db import models
from django.dispatch import receiver

from .exceptions import ConfigurationError


class VariantKind(models.TextChoices):
    SQUARE = 'SQUARE', 'Square'
    WIDE = 'WIDE', 'Wide'
    PORTRAIT = 'PORTRAIT', 'Portrait'
    THUMBNAIL = 'THUMBNAIL', 'Thumbnail'

    @classmethod
    def parse(cls, value):
        """Return the kind for ``value`` (case-insensitive) or None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class License(models.TextChoices):
    PERSONAL = 'personal', 'Personal'
    COMMERCIAL = 'commercial', 'Commercial'


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int

    @property
    def aspect_ratio(self):
        """CSS aspect-ratio value, e.g. ``"1920 / 1080"``."""
        return f"{self.width} / {self.height}"


@dataclass(frozen=True)
class VariantDefinition:
    kind: VariantKind
    label: str
    dimensions: Dimensions


DEFAULT_VARIANTS = {
    VariantKind.SQUARE: {'label': 'Square Crop', 'width': 1200, 'height': 1200},
    VariantKind.WIDE: {'label': 'Widescreen', 'width': 1920, 'height': 1080},
    VariantKind.PORTRAIT: {'label': 'Portrait', 'width': 1080, 'height': 1440},
    VariantKind.THUMBNAIL: {'label': 'Thumbnail', 'width': 400, 'height': 400},
}


def _positive_int(kind, name, value):
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(
            f"Image variant {kind} has invalid {name} {value!r}; expected a positive integer"
        )
    return value


class VariantCatalog:
    """
    Read-only mapping from every VariantKind to its VariantDefinition.

    Construction fails with ConfigurationError unless the mapping covers the
    whole closed set with positive integer dimensions, so a catalog that
    exists is always total.
    """

    def __init__(self, definitions):
        table = {}
        for key, entry in definitions.items():
            kind = VariantKind.parse(key)
            if kind is None:
                raise ConfigurationError(f"Unknown image variant kind: {key!r}")
            if kind in table:
                raise ConfigurationError(f"Image variant {kind} is defined twice")
            table[kind] = VariantDefinition(
                kind=kind,
                label=str(entry.get('label') or kind.label),
                dimensions=Dimensions(
                    width=_positive_int(kind, 'width', entry.get('width')),
                    height=_positive_int(kind, 'height', entry.get('height')),
                ),
            )

        missing = [kind for kind in VariantKind if kind not in table]
        if missing:
            raise ConfigurationError(
                f"Image variants without a definition: {', '.join(missing)}"
            )
        self._definitions = MappingProxyType(table)

    @classmethod
    def from_overrides(cls, overrides=None):
        """Build from DEFAULT_VARIANTS with per kind ``overrides`` applied."""
        merged = {kind: dict(entry) for kind, entry in DEFAULT_VARIANTS.items()}
        for key, entry in (overrides or {}).items():
            kind = VariantKind.parse(key)
            if kind is None:
                raise ConfigurationError(f"Unknown image variant kind: {key!r}")
            merged[kind].update(entry)
        return cls(merged)

    def lookup(self, kind):
        parsed = VariantKind.parse(kind)
        if parsed is None:
            raise ConfigurationError(f"Unknown image variant kind: {kind!r}")
        return self._definitions[parsed]

    def __iter__(self):
        return iter(self._definitions.values())

    def __len__(self):
        return len(self._definitions)


@lru_cache(maxsize=None)
def get_variant_catalog():
    """The process wide catalog built from CATALOG_IMAGE_VARIANTS."""
    return VariantCatalog.from_overrides(getattr(settings, 'CATALOG_IMAGE_VARIANTS', None))


@receiver(setting_changed)
def _reset_variant_catalog(sender, setting, **kwargs):
    if setting == 'CATALOG_IMAGE_VARIANTS':
        get_variant_catalog.cache_clear()
