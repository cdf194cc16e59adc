from schemas.base import CamelModel


class NoticeSchema(CamelModel):
    id: str
    text: str
    date: str

