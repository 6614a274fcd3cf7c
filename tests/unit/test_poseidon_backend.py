"""
Poseidon Backend Tests
Runs the core operations on the poseidon_py backend when it is installed.
"""
import pytest

poseidon_hash = pytest.importorskip("poseidon_py.poseidon_hash")

from smt_core.crypto.hashing import STARKNET_PRIME, PoseidonHasher, load_hasher
from smt_core.merkle.entry import Entry
from smt_core.merkle.operations import add, delete, update, verify
from smt_core.schemas.constants import FIELD_MODULUS
from smt_core.schemas.errors import FieldElementException

from fixtures import make_entries, make_entry, make_tree


def _starknet_entry(entry: Entry) -> Entry:
    """Reduce an entry into the range poseidon_py accepts."""
    return Entry(entry.key % STARKNET_PRIME, entry.value % STARKNET_PRIME)


@pytest.fixture
def poseidon():
    return load_hasher("poseidon")


def test_load_hasher_uses_poseidon_hash_many(poseidon):
    assert isinstance(poseidon, PoseidonHasher)
    expected = poseidon_hash.poseidon_hash_many([1, 2]) % FIELD_MODULUS
    assert poseidon.hash(1, 2, False) == expected


def test_leaf_appends_domain_constant(poseidon):
    expected = poseidon_hash.poseidon_hash_many([1, 2, 1]) % FIELD_MODULUS
    assert poseidon.hash(1, 2, True) == expected


def test_rejects_inputs_above_starknet_prime(poseidon, zeros):
    root = poseidon.hash(5, 6, True)
    with pytest.raises(FieldElementException):
        verify(Entry(5 + STARKNET_PRIME, 6), None, zeros, root, poseidon)


@pytest.mark.slow
def test_operations_round_trip(poseidon):
    entries = [_starknet_entry(e) for e in make_entries(4)]
    tree = make_tree(entries, poseidon)
    for entry in entries:
        verify(entry, None, tree.siblings_for(entry.key), tree.root, poseidon)

    new = _starknet_entry(make_entry(99))
    grown = tree.copy()
    grown.insert(new.key, new.value)
    siblings = grown.siblings_for(new.key)
    new_root = add(new, tree.root, siblings, poseidon)
    assert new_root == grown.root
    assert delete(new, new_root, siblings, poseidon) == tree.root
    assert update(new.value, new, new_root, siblings, poseidon) == new_root
