#!/usr/bin/env python3
#
# attr: memory 128
# attr: timeout 15

import dataclasses
import json

@dataclasses.dataclass(frozen=True)
class SameModuleInput:
    test_property: str = None

    def to_json(self):
        return json.dumps({'testProperty': self.test_property})

    @classmethod
    def from_event(cls, event):
        return cls(test_property=event.get('testProperty'))

def main(event, context):
    """
    >>> main({'testProperty': 'Testing'}, None)
    'Testing'
    """
    return SameModuleInput.from_event(event).test_property
