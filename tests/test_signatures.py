import json

import pytest

from deterministic.signatures import SignatureStore, merge_signature, serialize_signatures
from tests.conftest import read_json, write_json

SIGNATURE = "0x" + "ef" * 65


@pytest.fixture
def store_filepath(tmp_path):
    return tmp_path / "deterministicConfig" / "factoryProxy" / "signatures.json"


def test_merge_is_additive():
    signatures = {"1": "0x01", "10": "0x0a"}
    merged = merge_signature(signatures, 8453, SIGNATURE)
    assert merged == {"1": "0x01", "10": "0x0a", "8453": SIGNATURE}
    assert signatures == {"1": "0x01", "10": "0x0a"}


def test_merge_overwrites_target_chain_only():
    signatures = {"1": "0x01", "8453": "0xdead"}
    merged = merge_signature(signatures, 8453, SIGNATURE)
    assert merged == {"1": "0x01", "8453": SIGNATURE}


def test_load_missing_store_is_empty(store_filepath):
    store = SignatureStore.load(store_filepath)
    assert len(store) == 0
    assert store.base_digest is None


@pytest.mark.parametrize(
    "contents",
    [
        "{not json",
        "[]",
        '{"base": "0x01"}',
        '{"07": "0x01"}',
        '{"0": "0x01"}',
        '{"\\u00b2": "0x01"}',
        '{"8453": 1}',
        '{"8453": "not hex"}',
    ],
)
def test_load_corrupt_store(store_filepath, contents):
    store_filepath.parent.mkdir(parents=True)
    store_filepath.write_text(contents)
    with pytest.raises(SignatureStore.Corrupt):
        SignatureStore.load(store_filepath)


def test_bootstrap_save(store_filepath):
    store = SignatureStore.load(store_filepath).merge(8453, SIGNATURE)
    store.save()
    assert read_json(store_filepath) == {"8453": SIGNATURE}


def test_save_preserves_existing_entries(store_filepath):
    existing = {"1": "0x01", "999": "0x03"}
    write_json(store_filepath, existing)
    SignatureStore.load(store_filepath).merge(8453, SIGNATURE).save()
    assert read_json(store_filepath) == {**existing, "8453": SIGNATURE}


def test_merge_does_not_mutate_loaded_store(store_filepath):
    store = SignatureStore.load(store_filepath)
    merged = store.merge(10, SIGNATURE)
    assert 10 in merged
    assert 10 not in store


def test_saved_store_is_ordered_by_chain_id(store_filepath):
    write_json(store_filepath, {"8453": "0x01", "10": "0x02"})
    SignatureStore.load(store_filepath).merge(7777777, SIGNATURE).merge(1, SIGNATURE).save()
    assert list(read_json(store_filepath)) == ["1", "10", "8453", "7777777"]


def test_serialize_format():
    data = serialize_signatures({"10": "0x02", "1": "0x01"})
    assert data.decode() == '{\n  "1": "0x01",\n  "10": "0x02"\n}'


def test_save_conflict_when_store_changed(store_filepath):
    write_json(store_filepath, {"1": "0x01"})
    store = SignatureStore.load(store_filepath)

    # another run writes in between
    write_json(store_filepath, {"1": "0x01", "10": "0x02"})

    with pytest.raises(SignatureStore.Conflict):
        store.merge(8453, SIGNATURE).save()
    assert read_json(store_filepath) == {"1": "0x01", "10": "0x02"}


def test_save_conflict_when_store_created(store_filepath):
    store = SignatureStore.load(store_filepath)
    write_json(store_filepath, {"10": "0x02"})
    with pytest.raises(SignatureStore.Conflict):
        store.merge(8453, SIGNATURE).save()


def test_consecutive_saves(store_filepath):
    store = SignatureStore.load(store_filepath).merge(1, SIGNATURE)
    store.save()
    store = store.merge(10, SIGNATURE)
    store.save()
    assert json.loads(store_filepath.read_text()) == {"1": SIGNATURE, "10": SIGNATURE}
    assert not store_filepath.with_suffix(".temp.json").exists()
