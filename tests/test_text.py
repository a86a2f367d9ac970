import pytest

from quotevault.utils.text import new_object_id, validate_object_id


def test_new_object_id_is_valid_and_unique():
    ids = {new_object_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(validate_object_id(value) for value in ids)


@pytest.mark.parametrize("value, expected", [
    ("507f1f77bcf86cd799439011", True),
    ("507F1F77BCF86CD799439011", True),
    ("507f1f77bcf86cd79943901", False),
    ("507f1f77bcf86cd79943901z", False),
    ("invalid-id", False),
    ("", False),
    (None, False),
    (12345, False),
])
def test_validate_object_id(value, expected):
    assert validate_object_id(value) is expected

