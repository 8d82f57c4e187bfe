"""Tests for the secure password generator."""

import os
import random

import pytest

from privnote.domain.errors import EntropySourceError
from privnote.domain.services.password_service import (
    DEFAULT_ALPHABET,
    generate_password,
    next_uniform_index,
)


class TestGeneratePassword:
    def test_default_alphabet_is_62_alphanumerics(self):
        assert len(DEFAULT_ALPHABET) == 62
        assert len(set(DEFAULT_ALPHABET)) == 62
        assert DEFAULT_ALPHABET.isalnum()

    def test_default_length_and_alphabet(self):
        for _ in range(200):
            password = generate_password()
            assert len(password) == 9
            assert all(char in DEFAULT_ALPHABET for char in password)

    def test_custom_length_and_alphabet(self):
        password = generate_password(length=32, alphabet="ab")
        assert len(password) == 32
        assert set(password) <= {"a", "b"}

    def test_consecutive_passwords_differ(self):
        assert generate_password() != generate_password()

    def test_not_reproducible_from_seed(self):
        random.seed(1234)
        first = generate_password()
        random.seed(1234)
        second = generate_password()
        assert first != second

    @pytest.mark.parametrize("length, alphabet", [(0, DEFAULT_ALPHABET), (9, "")])
    def test_invalid_parameters(self, length, alphabet):
        with pytest.raises(ValueError):
            generate_password(length=length, alphabet=alphabet)

    def test_entropy_failure_propagates(self, monkeypatch):
        def unavailable(size):
            raise NotImplementedError("no randomness source")

        monkeypatch.setattr(os, "urandom", unavailable)
        with pytest.raises(EntropySourceError):
            generate_password()


class TestNextUniformIndex:
    def test_rejects_biased_bytes(self, monkeypatch):
        # 62 * 4 = 248, so bytes 248..255 must be redrawn
        draws = iter([bytes([250]), bytes([255]), bytes([67])])
        monkeypatch.setattr(os, "urandom", lambda size: next(draws))
        assert next_uniform_index(62) == 67 % 62

    def test_bound_of_one(self):
        assert next_uniform_index(1) == 0

    def test_invalid_bound(self):
        with pytest.raises(ValueError):
            next_uniform_index(0)

    def test_large_bound_uses_multiple_bytes(self, monkeypatch):
        sizes = []

        def fake_urandom(size):
            sizes.append(size)
            return b"\x00\x07"

        monkeypatch.setattr(os, "urandom", fake_urandom)
        assert next_uniform_index(1000) == 7
        assert sizes == [2]

    def test_covers_whole_range(self):
        seen = {next_uniform_index(4) for _ in range(500)}
        assert seen == {0, 1, 2, 3}
