from dataclasses import dataclass


@dataclass(frozen=True)
class ClientProfile:
    name: str
    contact_number: str  # digits only, DDD + 9 digits
    profile_complete: bool = True
