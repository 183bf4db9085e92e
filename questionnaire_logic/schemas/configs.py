"""Pydantic schemas for question type configuration blobs.

Photo upload, slider and rating questions each carry a small configuration
object. Defaults are applied by the parsers in
``questionnaire_logic.services.question_config``, not here, so these models
only describe shape. Values are not range-checked: drafts saved by the
authoring UI may hold any number, and it is kept as stored.
"""

from typing import Optional, Union

from pydantic import Field

from questionnaire_logic.schemas.base import JsonModel


class PhotoType(JsonModel):
    """A photo the patient is asked to upload.

    Attributes:
        id: Identifier (e.g. "front_smile")
        name: Display name
        description: Short description of the shot
        required: Whether the photo must be provided
        example_image: URL of an example photo
        example_image_path: Storage path of the example photo
        instructions: How to take the photo
    """
    id: str = ""
    name: Optional[str] = None
    description: str = ""
    required: bool = False
    example_image: Optional[str] = None
    example_image_path: Optional[str] = None
    instructions: Optional[str] = None


class Resolution(JsonModel):
    """Image resolution bound in pixels."""
    width: Optional[int] = None
    height: Optional[int] = None


class PhotoUploadConfig(JsonModel):
    """Configuration of a photo upload question.

    Attributes:
        types: Photos requested from the patient
        max_file_size: Maximum upload size in bytes
        allowed_formats: Accepted file extensions
        min_resolution: Smallest accepted resolution
        max_resolution: Largest accepted resolution
        compression_quality: Client-side JPEG quality, 0..1
    """
    types: list[PhotoType] = Field(default_factory=list)
    max_file_size: int
    allowed_formats: list[str]
    min_resolution: Optional[Resolution] = None
    max_resolution: Optional[Resolution] = None
    compression_quality: Optional[float] = None


class SliderConfig(JsonModel):
    """Configuration of a slider question."""
    min: Union[int, float]
    max: Union[int, float]
    step: Union[int, float]
    show_labels: bool
    left_label: Optional[str] = None
    right_label: Optional[str] = None
    show_value: bool


class RatingConfig(JsonModel):
    """Configuration of a rating question.

    Attributes:
        scale: Number of rating points
        show_labels: Whether labels are rendered under the points
        labels: One label per point
        allow_half: Whether half points can be selected
    """
    scale: int
    show_labels: bool
    labels: Optional[list[str]] = None
    allow_half: bool
