from enum import Enum


class HouseType(str, Enum):
    DETACHED = "Detached"
    SEMI_DETACHED = "Semi-detached"
    TERRACED = "Terraced"
    BUNGALOW = "Bungalow"
    MANSION = "Mansion"
    VILLA = "Villa"
