from typing import List
from pydantic import BaseModel


class DirectoryClient(BaseModel):
    name: str
    email: str


class ClientListData(BaseModel):
    total: int
    items: List[DirectoryClient]
