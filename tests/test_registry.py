from __future__ import annotations

import pytest

from handcraft_mapper.errors import (
    DuplicateMappingDefinitionError,
    IllegalMappingDefinitionError,
    MappingDefinitionNotFoundError,
)
from handcraft_mapper.mapping.keys import MappingKey
from handcraft_mapper.mapping.registry import MappingRegistry


class Animal:
    pass


class Dog(Animal):
    pass


class Puppy(Dog):
    pass


class AnimalDTO:
    pass


class Provider:
    def animal(self, source: Animal, target: AnimalDTO) -> None:
        target.kind = "animal"

    def animal_again(self, source: Animal, target: AnimalDTO) -> None:
        target.kind = "again"

    def dog(self, source: Dog) -> AnimalDTO:
        return AnimalDTO()

    def puppy(self, source: Puppy, target: AnimalDTO) -> None:
        target.kind = "puppy"

    def broken(self, source: Animal) -> None:
        pass


def test_register_returns_key():
    registry = MappingRegistry()
    key = registry.register(Provider(), "animal")
    assert key == MappingKey(Animal, AnimalDTO, "")
    assert key in registry
    assert len(registry) == 1
    assert registry.keys() == [key]


def test_illegal_definition_is_not_added():
    registry = MappingRegistry()
    with pytest.raises(IllegalMappingDefinitionError) as exc:
        registry.register(Provider(), "broken")
    assert "Provider.broken" in str(exc.value)
    assert len(registry) == 0


def test_duplicate_names_both_callables_and_first_wins():
    registry = MappingRegistry()
    provider = Provider()
    registry.register(provider, "animal")
    with pytest.raises(DuplicateMappingDefinitionError) as exc:
        registry.register(provider, "animal_again")
    message = str(exc.value)
    assert "Provider.animal'" in message
    assert "Provider.animal_again" in message
    assert exc.value.key == MappingKey(Animal, AnimalDTO)
    entry = registry.resolve(MappingKey(Animal, AnimalDTO))
    assert entry.description.endswith("Provider.animal")


def test_same_pair_under_different_names_is_independent():
    registry = MappingRegistry()
    provider = Provider()
    registry.register(provider, "animal")
    registry.register(provider, "animal_again", "short")
    plain = registry.resolve(MappingKey(Animal, AnimalDTO))
    named = registry.resolve(MappingKey(Animal, AnimalDTO, "short"))
    assert plain is not named
    assert named.key.mapping_name == "short"


def test_resolution_is_deterministic():
    registry = MappingRegistry()
    registry.register(Provider(), "animal")
    key = MappingKey(Animal, AnimalDTO)
    assert registry.resolve(key) is registry.resolve(key) is registry.resolve(key)


def test_ancestor_fallback_and_self_training():
    registry = MappingRegistry()
    registry.register(Provider(), "animal")
    base_entry = registry.resolve(MappingKey(Animal, AnimalDTO))

    requested = MappingKey(Puppy, AnimalDTO)
    first = registry.resolve(requested)
    assert first is base_entry
    # Cached for the requested key, not registered
    assert requested in registry._trained
    assert requested not in registry
    assert registry.resolve(requested) is first


def test_closest_ancestor_wins():
    registry = MappingRegistry()
    provider = Provider()
    registry.register(provider, "animal")
    registry.register(provider, "dog")
    entry = registry.resolve(MappingKey(Puppy, AnimalDTO))
    assert entry.key.source_type is Dog


def test_direct_registration_after_training_wins_without_duplicate_error():
    registry = MappingRegistry()
    provider = Provider()
    registry.register(provider, "animal")
    assert registry.resolve(MappingKey(Puppy, AnimalDTO)).key.source_type is Animal

    registry.register(provider, "puppy")
    entry = registry.resolve(MappingKey(Puppy, AnimalDTO))
    assert entry.key.source_type is Puppy


def test_new_closer_ancestor_invalidates_trained_entries():
    registry = MappingRegistry()
    provider = Provider()
    registry.register(provider, "animal")
    assert registry.resolve(MappingKey(Puppy, AnimalDTO)).key.source_type is Animal
    registry.register(provider, "dog")
    assert registry.resolve(MappingKey(Puppy, AnimalDTO)).key.source_type is Dog


def test_fallback_does_not_cross_names_or_targets():
    registry = MappingRegistry()
    registry.register(Provider(), "animal")
    assert registry.resolve(MappingKey(Dog, AnimalDTO, "other")) is None
    assert registry.resolve(MappingKey(Dog, Animal)) is None


def test_fallback_never_walks_down_the_hierarchy():
    registry = MappingRegistry()
    registry.register(Provider(), "puppy")
    assert not registry.allows_to_map(Dog, AnimalDTO)


def test_allows_to_map_and_load():
    registry = MappingRegistry()
    registry.register(Provider(), "animal")
    assert registry.allows_to_map(Dog, AnimalDTO)
    assert not registry.allows_to_map(Dog, AnimalDTO, "x")
    with pytest.raises(MappingDefinitionNotFoundError) as exc:
        registry.load(MappingKey(Dog, AnimalDTO, "x"))
    assert exc.value.key == MappingKey(Dog, AnimalDTO, "x")
    assert "('x')" in str(exc.value)


def test_register_plain_function():
    def convert(source: Dog) -> AnimalDTO:
        return AnimalDTO()

    registry = MappingRegistry()
    key = registry.register_callable(convert, "fn")
    assert key == MappingKey(Dog, AnimalDTO, "fn")
    assert "convert" in registry.resolve(key).description
