import dataclasses
import json

@dataclasses.dataclass(frozen=True)
class OtherModuleInput:
    other_test_property: str = None

    def to_json(self):
        return json.dumps({'otherTestProperty': self.other_test_property})

    @classmethod
    def from_event(cls, event):
        return cls(other_test_property=event.get('otherTestProperty'))
