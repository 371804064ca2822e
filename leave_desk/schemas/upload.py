from .common import ApiModel


class UploadOut(ApiModel):
    key: str
    url: str
    content_type: str
    size: int
