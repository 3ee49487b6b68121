import enum


class RequestType(str, enum.Enum):
    inbound = "inbound"
    outbound = "outbound"
