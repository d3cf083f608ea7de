from __future__ import annotations

from dataclasses import dataclass, fields, replace


@dataclass(frozen=True)
class CustomerInfo:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""

    def is_complete(self) -> bool:
        return all(getattr(self, f.name).strip() for f in fields(self))

    def merged(self, **changes: str) -> CustomerInfo:
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown customer fields: {', '.join(sorted(unknown))}")
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def to_payload(self) -> dict[str, str]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
        }
