"""
Tests for the erasable containers.
"""

import pickle

import pytest

from aesbridge.core.config import BridgeConfig, MemoryConfig
from aesbridge.core.errors import ErasedMaterialError
from aesbridge.core.memory.secure_memory import SealedBytes, SensitiveBuffer


class TestSensitiveBuffer:
    """Test the mutable sensitive workspace."""

    def test_starts_zeroed(self):
        buf = SensitiveBuffer(16, lock_memory=False)
        assert buf.read() == bytes(16)
        assert len(buf) == 16

    def test_write_and_read(self):
        buf = SensitiveBuffer(32, lock_memory=False)
        assert buf.write(b"hello-world") == 11
        assert buf.read(11) == b"hello-world"
        assert buf.data_length == 11

    def test_append(self):
        buf = SensitiveBuffer(8, lock_memory=False)
        buf.append(b"abcd")
        buf.append(b"efgh")
        assert buf.read() == b"abcdefgh"

    def test_write_overflow_rejected(self):
        buf = SensitiveBuffer(4, lock_memory=False)
        with pytest.raises(ValueError):
            buf.write(b"12345")
        assert buf.read() == bytes(4)

    def test_from_bytes(self):
        buf = SensitiveBuffer.from_bytes(bytearray(b"secret"), lock_memory=False)
        assert buf.size == 6
        assert buf.read() == b"secret"

    def test_view_aliases_storage(self):
        buf = SensitiveBuffer(4, lock_memory=False)
        view = buf.view()
        view[0] = 0x41
        assert buf.read(1) == b"A"

    def test_wipe_zeroes_storage(self):
        buf = SensitiveBuffer.from_bytes(b"\xff" * 16, lock_memory=False)
        view = buf.view()
        buf.wipe()
        assert bytes(view) == bytes(16)
        assert buf.is_wiped

    def test_wipe_is_idempotent(self):
        buf = SensitiveBuffer(8, lock_memory=False)
        buf.wipe()
        buf.wipe()
        assert buf.is_wiped

    def test_read_after_wipe_raises(self):
        buf = SensitiveBuffer.from_bytes(b"secret", lock_memory=False)
        buf.wipe()
        with pytest.raises(ErasedMaterialError):
            buf.read()
        with pytest.raises(ErasedMaterialError):
            buf.view()
        with pytest.raises(ErasedMaterialError):
            buf.write(b"x")

    def test_context_manager_wipes(self):
        with SensitiveBuffer(16, lock_memory=False) as buf:
            buf.write(b"k" * 16)
            view = buf.view()
        assert buf.is_wiped
        assert bytes(view) == bytes(16)

    def test_context_manager_wipes_on_exception(self):
        with pytest.raises(RuntimeError):
            with SensitiveBuffer(16, lock_memory=False) as buf:
                buf.write(b"k" * 16)
                raise RuntimeError("boom")
        assert buf.is_wiped

    def test_configured_wipe_passes(self):
        BridgeConfig._instance = BridgeConfig(memory=MemoryConfig(wipe_passes=3))
        buf = SensitiveBuffer.from_bytes(b"\x33" * 8, lock_memory=False)
        view = buf.view()
        buf.wipe()
        assert bytes(view) == bytes(8)

    def test_wipe_ignores_config_changed_after_construction(self, monkeypatch):
        buf = SensitiveBuffer.from_bytes(b"k" * 16, lock_memory=False)
        view = buf.view()
        monkeypatch.setenv("AESBRIDGE_MEMORY__WIPE_PASSES", "abc")
        BridgeConfig.reset_instance()
        buf.wipe()
        assert buf.is_wiped
        assert bytes(view) == bytes(16)

    @pytest.mark.parametrize("passes", ["abc", "9"])
    def test_invalid_config_rejected_before_allocation(self, monkeypatch, passes):
        monkeypatch.setenv("AESBRIDGE_MEMORY__WIPE_PASSES", passes)
        with pytest.raises(ValueError):
            SensitiveBuffer(16, lock_memory=False)

    def test_lock_memory_reports_bool(self):
        buf = SensitiveBuffer(64, lock_memory=True)
        assert isinstance(buf.is_locked, bool)
        buf.wipe()
        assert buf.is_locked is False

    def test_lock_memory_default_from_config(self):
        BridgeConfig._instance = BridgeConfig(memory=MemoryConfig(lock_memory=False))
        buf = SensitiveBuffer(64)
        assert buf.is_locked is False

    def test_negative_size(self):
        with pytest.raises(ValueError):
            SensitiveBuffer(-1)

    def test_repr_hides_content(self):
        buf = SensitiveBuffer.from_bytes(b"hunter2", lock_memory=False)
        assert "hunter2" not in repr(buf)
        buf.wipe()
        assert repr(buf) == "SensitiveBuffer(WIPED)"


class TestSealedBytes:
    """Test write-once sensitive bytes."""

    def test_copies_input(self):
        source = bytearray(b"material")
        sealed = SealedBytes(source)
        source[0] = 0
        assert bytes(sealed) == b"material"

    def test_view_is_read_only(self):
        sealed = SealedBytes(b"material")
        view = sealed.view()
        assert view.readonly
        with pytest.raises(TypeError):
            view[0] = 0

    def test_wipe(self):
        sealed = SealedBytes(b"material")
        sealed.wipe()
        assert sealed.is_wiped
        with pytest.raises(ErasedMaterialError):
            bytes(sealed)
        with pytest.raises(ErasedMaterialError):
            sealed.hex()

    def test_equality_is_by_content(self):
        assert SealedBytes(b"abc") == SealedBytes(bytearray(b"abc"))
        assert SealedBytes(b"abc") != SealedBytes(b"abd")

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(SealedBytes(b"abc"))

    def test_equality_after_wipe_raises(self):
        a = SealedBytes(b"abc")
        b = SealedBytes(b"abc")
        a.wipe()
        with pytest.raises(ErasedMaterialError):
            a == b

    def test_from_hex(self):
        assert bytes(SealedBytes.from_hex("00ff10")) == b"\x00\xff\x10"

    def test_cannot_be_pickled(self):
        with pytest.raises(TypeError):
            pickle.dumps(SealedBytes(b"abc"))

    def test_context_manager(self):
        with SealedBytes(b"abc") as sealed:
            assert len(sealed) == 3
        assert sealed.is_wiped

    def test_repr_hides_content(self):
        assert repr(SealedBytes(b"abc")) == "SealedBytes(len=3)"
