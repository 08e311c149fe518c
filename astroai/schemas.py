# schemas.py
# Wire models shared by the NASA and AI routes.

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class Rover(str, Enum):
    perseverance = "perseverance"
    curiosity = "curiosity"
    opportunity = "opportunity"
    spirit = "spirit"


class PhotoSource(str, Enum):
    perseverance = "perseverance"
    curiosity = "curiosity"
    opportunity = "opportunity"
    spirit = "spirit"
    images_api = "images-api"


class CameraInfo(BaseModel):
    id: int = 0
    name: str = "N/A"
    rover_id: int = 0
    full_name: str = ""


class RoverInfo(BaseModel):
    id: int = 0
    name: str = "none"
    landing_date: str = ""
    launch_date: str = ""
    status: str = ""


class PhotoRecord(BaseModel):
    """
    One image with provenance. Rover photos parse straight from the Mars
    Rover Photos API payload; image-library results are synthesized.
    """

    id: Union[int, str]
    sol: Optional[int] = None
    camera: CameraInfo = Field(default_factory=CameraInfo)
    img_src: str
    earth_date: Optional[str] = None
    rover: RoverInfo = Field(default_factory=RoverInfo)


class WeatherRecord(BaseModel):
    source: str
    sol: Optional[str] = None
    terrestrial_date: Optional[str] = None
    min_temp: Optional[float] = None
    max_temp: Optional[float] = None
    pressure: Optional[float] = None
    season: Optional[str] = None
    stale: bool = True
    note: Optional[str] = None


class ResolutionResult(BaseModel):
    date: str
    source: PhotoSource
    photo: PhotoRecord
    weather: WeatherRecord


class ChatRequest(BaseModel):
    message: Optional[str] = None


class ChatResponse(BaseModel):
    response: str
