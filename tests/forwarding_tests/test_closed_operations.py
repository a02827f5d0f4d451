import logging

import pytest

from tests.variants import Employee, Manager, Note, Person


def test_merge() -> None:
    person = Person({'name': 'Peter', 'age': 32}).merge({'employee_id': 345})

    assert isinstance(person, Person)
    assert person['employee_id'] == 345
    assert person.to_dict() == {'name': 'Peter', 'age': 32, 'employee_id': 345}


def test_merge_keeps_original() -> None:
    person = Person({'name': 'Peter', 'age': 32})

    person.merge({'age': 33}, employee_id=345)

    assert person.to_dict() == {'name': 'Peter', 'age': 32}


def test_merge_multiple() -> None:
    person = Person({'name': 'Peter', 'age': 32}).merge(
        {'age': 33}, {1: 'one'}, nickname='Pete'
    )

    assert isinstance(person, Person)
    assert person.to_dict() == {
        'name': 'Peter',
        'age': 33,
        '1': 'one',
        'nickname': 'Pete',
    }


def test_merge_transforms_keys() -> None:
    manager = Manager({'name': 'Jane', 'age': 40, 'employee_id': 1}).merge(
        {'Department': 'IT'}
    )

    assert isinstance(manager, Manager)
    assert manager.department == 'IT'
    assert list(manager) == ['name', 'age', 'employee_id', 'department']


def test_merge_delegator() -> None:
    person = Person({'name': 'Peter', 'age': 32})
    employee = Employee({'name': 'Paul', 'age': 23, 'employee_id': 1})

    assert person.merge(employee) == Person(employee.to_dict())


def test_union() -> None:
    person = Person({'name': 'Peter', 'age': 32})

    merged = person | {'age': 33}
    reflected = {'age': 33, 'employee_id': 345} | person

    assert isinstance(merged, Person)
    assert merged.age == 33
    assert type(reflected) is dict
    assert reflected == {'age': 32, 'employee_id': 345, 'name': 'Peter'}


def test_union_with_non_mapping() -> None:
    person = Person({'name': 'Peter', 'age': 32})

    with pytest.raises(TypeError):
        person | [('age', 33)]


def test_except_keeping_required_attributes() -> None:
    person = Person({'name': 'Jake', 'age': 5, 'favorite_toy': 'Teddy Bear'})

    person = person.except_('favorite_toy')

    assert isinstance(person, Person)
    assert 'favorite_toy' not in person
    for key in Person.required_attributes():
        assert key in person


def test_except_removing_required_attribute() -> None:
    result = Person({'name': 'Jake', 'age': 5}).except_('age')

    assert type(result) is dict
    assert result == {'name': 'Jake'}


def test_except_transforms_keys() -> None:
    manager = Manager(
        {'name': 'Jake', 'age': 50, 'employee_id': 1, 'office': 'B'}
    )

    assert isinstance(manager.except_('OFFICE'), Manager)
    assert manager.except_('Employee_ID') == {
        'name': 'Jake',
        'age': 50,
        'office': 'B',
    }


def test_slice_keeping_required_attributes() -> None:
    person = Person({'name': 'Jake', 'age': 5, 'favorite_toy': 'Teddy Bear'})

    person = person.slice('name', 'age')

    assert isinstance(person, Person)
    assert 'favorite_toy' not in person
    for key in Person.required_attributes():
        assert key in person


def test_slice_removing_required_attribute() -> None:
    result = Person({'name': 'Jake', 'age': 5}).slice('age')

    assert type(result) is dict
    assert 'name' not in result
    assert result == {'age': 5}


def test_slice_ignores_missing_keys() -> None:
    person = Person({'name': 'Jake', 'age': 5}).slice('age', 'name', 'toy')

    assert isinstance(person, Person)
    assert list(person) == ['age', 'name']


def test_compact() -> None:
    person = Person({'name': 'Jake', 'age': 5, 'toy': None})

    compacted = person.compact()
    degraded = Person({'name': None, 'age': 5}).compact()

    assert isinstance(compacted, Person)
    assert 'toy' not in compacted
    assert type(degraded) is dict
    assert degraded == {'age': 5}


def test_select_and_reject() -> None:
    person = Person({'name': 'Jake', 'age': 5, 'toy': 'Bear', 'pet': 'Cat'})

    selected = person.select(lambda key, value: key != 'toy')
    rejected = person.reject(lambda key, value: isinstance(value, int))

    assert isinstance(selected, Person)
    assert list(selected) == ['name', 'age', 'pet']
    assert type(rejected) is dict
    assert rejected == {'name': 'Jake', 'toy': 'Bear', 'pet': 'Cat'}


def test_transform_values() -> None:
    person = Person({'name': 'Jake', 'age': 5})

    result = person.transform_values(str)

    assert isinstance(result, Person)
    assert result.to_dict() == {'name': 'Jake', 'age': '5'}


def test_degradation_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger='mapping_delegator')

    Person({'name': 'Jake', 'age': 5}).except_('age')

    assert any(
        'returning plain dictionary' in record.getMessage()
        for record in caplog.records
    )


def test_merge_delegator_with_method_named_keys() -> None:
    note = Note({'keys': 'house', 'items': 'shelf'})

    person = Person({'name': 'Peter', 'age': 32}).merge(note)

    assert isinstance(person, Person)
    assert person.to_dict() == {
        'name': 'Peter',
        'age': 32,
        'keys': 'house',
        'items': 'shelf',
    }


def test_reflected_union_with_delegator() -> None:
    note = Note({'keys': 'house', 'age': 1})
    person = Person({'name': 'Peter', 'age': 32})

    assert person.__ror__(note) == {
        'keys': 'house',
        'age': 32,
        'name': 'Peter',
    }
