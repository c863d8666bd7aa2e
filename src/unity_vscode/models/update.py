from pydantic import BaseModel


class UpdateInfo(BaseModel):
    """Result of comparing the published version with the running one."""
    current_version: str
    remote_version: str | None = None
    update_available: bool = False
    source_url: str
