#!/usr/bin/env python3
#
# attr: memory 128
# attr: timeout 15

from inputs import OtherModuleInput

def main(event, context):
    """
    >>> main({'otherTestProperty': 'Testing'}, None)
    'Testing'
    """
    return OtherModuleInput.from_event(event).other_test_property
