from dataclasses import asdict, dataclass


@dataclass
class Material:
    id: int
    name: str
    stock: int
    unit: str

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=int(data["id"]),
            name=data["name"],
            stock=int(data["stock"]),
            unit=data["unit"],
        )

    def to_dict(self):
        return asdict(self)
