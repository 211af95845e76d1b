from dataclasses import dataclass


@dataclass(frozen=True)
class DocumentUploaded:
    file_id: str
    original_name: str
    mimetype: str
