"""Parsers for photo upload, slider and rating question configuration.

Each parser turns the raw JSON column payload into a typed config with
defaults filled in, and wraps a config back into a versioned payload.
Fields that are missing or falsy fall back to their defaults, except the
``show*`` flags, which only turn off when explicitly ``False``. A field of
the wrong type is replaced by its default and logged at WARNING, so a
half-finished draft never stops the questionnaire from rendering.
"""

import copy
from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from questionnaire_logic.schemas.base import JsonModel
from questionnaire_logic.schemas.configs import (
    PhotoType,
    PhotoUploadConfig,
    RatingConfig,
    SliderConfig,
)
from questionnaire_logic.logging_config import get_logger

logger = get_logger(__name__)

CONFIG_SCHEMA_VERSION = 1

DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024
DEFAULT_ALLOWED_FORMATS = ("jpg", "jpeg", "png")
DEFAULT_COMPRESSION_QUALITY = 0.8


PHOTO_DEFAULTS = {
    "types": [],
    "maxFileSize": DEFAULT_MAX_FILE_SIZE,
    "allowedFormats": list(DEFAULT_ALLOWED_FORMATS),
    "minResolution": None,
    "maxResolution": None,
    "compressionQuality": DEFAULT_COMPRESSION_QUALITY,
}

SLIDER_DEFAULTS = {
    "min": 0,
    "max": 100,
    "step": 1,
    "showLabels": True,
    "leftLabel": None,
    "rightLabel": None,
    "showValue": True,
}

RATING_DEFAULTS = {
    "scale": 5,
    "showLabels": True,
    "labels": [],
    "allowHalf": False,
}


def _wrap(config: Union[JsonModel, Mapping[str, Any]]) -> dict[str, Any]:
    """Versioned payload for a config model or raw dict."""
    payload = config.to_json() if isinstance(config, JsonModel) else dict(config)
    return {**payload, "version": CONFIG_SCHEMA_VERSION}


def _build(model: type, data: dict, defaults: dict, kind: str):
    """Validate ``data``; fields of the wrong type are replaced by defaults."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        unusable = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        logger.warning(f"Invalid {kind} config fields {unusable} replaced by defaults: {e}")
        data = {**data, **{key: copy.deepcopy(defaults.get(key)) for key in unusable}}

    return model.model_validate(data)


class PhotoConfigParser:
    """Parser for photo upload question configuration."""

    @staticmethod
    def parse(raw: Optional[Mapping[str, Any]]) -> PhotoUploadConfig:
        """Parse a stored photo upload config, applying defaults.

        Defaults: no photo types, 5 MiB max file size, jpg/jpeg/png,
        compression quality 0.8.

        Args:
            raw: Payload from the JSON column (may be None)

        Returns:
            PhotoUploadConfig
        """
        raw = raw or {}
        return _build(PhotoUploadConfig, {
            "types": raw.get("types") or [],
            "maxFileSize": raw.get("maxFileSize") or DEFAULT_MAX_FILE_SIZE,
            "allowedFormats": raw.get("allowedFormats") or list(DEFAULT_ALLOWED_FORMATS),
            "minResolution": raw.get("minResolution"),
            "maxResolution": raw.get("maxResolution"),
            "compressionQuality": raw.get("compressionQuality") or DEFAULT_COMPRESSION_QUALITY,
        }, PHOTO_DEFAULTS, "photo upload")

    @staticmethod
    def wrap(config: Union[PhotoUploadConfig, Mapping[str, Any]]) -> dict[str, Any]:
        """Wrap a photo upload config into its versioned payload."""
        return _wrap(config)

    @staticmethod
    def default_dental_photo_types() -> list[PhotoType]:
        """Standard set of dental photos offered to template authors.

        Returns a new list on every call.
        """
        return [
            PhotoType(
                id="front_smile",
                name="Front Smile",
                description="Full front view with natural smile",
                required=True,
                instructions="Look directly at camera and smile naturally",
            ),
            PhotoType(
                id="side_profile_left",
                name="Left Side Profile",
                description="Left side profile view",
                required=False,
                instructions="Turn head to show left side profile",
            ),
            PhotoType(
                id="side_profile_right",
                name="Right Side Profile",
                description="Right side profile view",
                required=False,
                instructions="Turn head to show right side profile",
            ),
            PhotoType(
                id="upper_teeth",
                name="Upper Teeth",
                description="Close-up of upper teeth",
                required=True,
                instructions="Open mouth to clearly show upper teeth",
            ),
            PhotoType(
                id="lower_teeth",
                name="Lower Teeth",
                description="Close-up of lower teeth",
                required=True,
                instructions="Open mouth to clearly show lower teeth",
            ),
            PhotoType(
                id="bite_view",
                name="Bite View",
                description="Teeth in normal bite position",
                required=False,
                instructions="Close teeth in normal bite position",
            ),
        ]


class SliderConfigParser:
    """Parser for slider question configuration."""

    @staticmethod
    def parse(raw: Optional[Mapping[str, Any]]) -> SliderConfig:
        """Parse a stored slider config, applying defaults.

        Defaults: range 0..100, step 1, labels and value shown.

        Args:
            raw: Payload from the JSON column (may be None)

        Returns:
            SliderConfig

        Example:
            >>> SliderConfigParser.parse({"max": 10, "showValue": False}).show_value
            False
        """
        raw = raw or {}
        return _build(SliderConfig, {
            "min": raw.get("min") or 0,
            "max": raw.get("max") or 100,
            "step": raw.get("step") or 1,
            "showLabels": raw.get("showLabels") is not False,
            "leftLabel": raw.get("leftLabel"),
            "rightLabel": raw.get("rightLabel"),
            "showValue": raw.get("showValue") is not False,
        }, SLIDER_DEFAULTS, "slider")

    @staticmethod
    def wrap(config: Union[SliderConfig, Mapping[str, Any]]) -> dict[str, Any]:
        """Wrap a slider config into its versioned payload."""
        return _wrap(config)


class RatingConfigParser:
    """Parser for rating question configuration."""

    @staticmethod
    def parse(raw: Optional[Mapping[str, Any]]) -> RatingConfig:
        """Parse a stored rating config, applying defaults.

        Defaults: 5-point scale, labels shown, no labels, whole points only.

        Args:
            raw: Payload from the JSON column (may be None)

        Returns:
            RatingConfig
        """
        raw = raw or {}
        return _build(RatingConfig, {
            "scale": raw.get("scale") or 5,
            "showLabels": raw.get("showLabels") is not False,
            "labels": raw.get("labels") or [],
            "allowHalf": raw.get("allowHalf") or False,
        }, RATING_DEFAULTS, "rating")

    @staticmethod
    def wrap(config: Union[RatingConfig, Mapping[str, Any]]) -> dict[str, Any]:
        """Wrap a rating config into its versioned payload."""
        return _wrap(config)

    @staticmethod
    def default_labels(scale: int) -> list[str]:
        """Default labels for a rating scale.

        Args:
            scale: Number of rating points

        Returns:
            Word labels for 3- and 5-point scales, "1".."scale" otherwise

        Example:
            >>> RatingConfigParser.default_labels(3)
            ['Poor', 'Good', 'Excellent']
            >>> RatingConfigParser.default_labels(4)
            ['1', '2', '3', '4']
        """
        if scale == 3:
            return ["Poor", "Good", "Excellent"]
        if scale == 5:
            return ["Very Poor", "Poor", "Average", "Good", "Excellent"]
        return [str(point) for point in range(1, scale + 1)]


def get_default_dental_photo_types() -> list[PhotoType]:
    """Module-level shortcut for PhotoConfigParser.default_dental_photo_types()."""
    return PhotoConfigParser.default_dental_photo_types()


def get_default_rating_labels(scale: int) -> list[str]:
    """Module-level shortcut for RatingConfigParser.default_labels()."""
    return RatingConfigParser.default_labels(scale)
