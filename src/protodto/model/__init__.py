from .models import DtoEnum, DtoEnumValue, DtoField, DtoMessage, OutputUnit, Validation

__all__ = ["DtoEnum", "DtoEnumValue", "DtoField", "DtoMessage", "OutputUnit", "Validation"]
