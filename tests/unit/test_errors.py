"""
Module 01 - Error Taxonomy Unit Tests
Tests for merkle_core/schemas/errors.py
"""
import pytest

from merkle_core.schemas.errors import (
    CanonicalizationException,
    EmptyTreeError,
    EncodingError,
    ErrorCodes,
    IndexOutOfRangeError,
    InvalidTreeDumpError,
    LeafNotFoundError,
    MalformedProofError,
    MerkleCommitException,
    MerkleError,
    MultiProofError,
    UnknownEncoderError,
    UnknownHashAlgorithmError,
)


class TestExceptionHierarchy:
    """Every error is a MerkleCommitException and a matching builtin."""

    @pytest.mark.parametrize("exc,builtin", [
        (EncodingError("x"), ValueError),
        (EmptyTreeError(), ValueError),
        (IndexOutOfRangeError(5, 3), IndexError),
        (LeafNotFoundError(), LookupError),
        (MalformedProofError("x"), ValueError),
        (MultiProofError("x"), ValueError),
        (InvalidTreeDumpError("x"), ValueError),
        (UnknownHashAlgorithmError("md5"), ValueError),
        (UnknownEncoderError("rlp"), ValueError),
        (CanonicalizationException("x"), ValueError),
    ])
    def test_bases(self, exc, builtin):
        assert isinstance(exc, MerkleCommitException)
        assert isinstance(exc, builtin)

    @pytest.mark.parametrize("exc,code", [
        (EncodingError("x"), ErrorCodes.LEAF_ENCODING_ERROR),
        (EmptyTreeError(), ErrorCodes.EMPTY_TREE),
        (IndexOutOfRangeError(5, 3), ErrorCodes.INDEX_OUT_OF_RANGE),
        (LeafNotFoundError(), ErrorCodes.LEAF_NOT_FOUND),
        (MalformedProofError("x"), ErrorCodes.MALFORMED_PROOF),
        (MultiProofError("x"), ErrorCodes.MULTIPROOF_INVALID),
        (InvalidTreeDumpError("x"), ErrorCodes.INVALID_TREE_DUMP),
    ])
    def test_codes(self, exc, code):
        assert exc.code == code

    def test_every_code_has_an_exception(self):
        raised = {
            exc.code for exc in [
                EncodingError("x"), EmptyTreeError(), IndexOutOfRangeError(5, 3),
                LeafNotFoundError(), MalformedProofError("x"), MultiProofError("x"),
                InvalidTreeDumpError("x"), UnknownHashAlgorithmError("md5"),
                UnknownEncoderError("rlp"), CanonicalizationException("x"),
            ]
        }
        declared = {
            value for name, value in vars(ErrorCodes).items() if name.isupper()
        }
        assert declared == raised


class TestStructuredDetails:
    """Details carry machine-readable context."""

    def test_encoding_details(self):
        exc = EncodingError("bad", field_index=2, declared_type="uint8")
        assert exc.details == {"field_index": 2, "declared_type": "uint8"}
        assert str(exc) == "bad"

    def test_index_details(self):
        exc = IndexOutOfRangeError(7, 4)
        assert exc.index == 7
        assert exc.leaf_count == 4
        assert "7" in exc.message and "4" in exc.message

    def test_malformed_step(self):
        assert MalformedProofError("x", step=3).details == {"step": 3}

    def test_repr(self):
        assert repr(EmptyTreeError()) == (
            "EmptyTreeError(code='EMPTY_TREE', "
            "message='Cannot build a Merkle tree from an empty leaf set')"
        )


class TestErrorModel:
    """Conversion between exceptions and MerkleError models."""

    def test_to_error_model(self):
        model = MultiProofError("dup", details={"indices": [1, 1]}).to_error_model()
        assert model.code == ErrorCodes.MULTIPROOF_INVALID
        assert model.message == "dup"
        assert model.details == {"indices": [1, 1]}
        assert model.retryable is False

    def test_round_trip(self):
        exc = MerkleError(code="X", message="m", details={"a": 1}).to_exception()
        assert isinstance(exc, MerkleCommitException)
        assert exc.code == "X"
        assert exc.to_error_model().model_dump() == {
            "code": "X",
            "message": "m",
            "details": {"a": 1},
            "retryable": False,
        }

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValueError):
            MerkleError(code="X", message="m", severity="high")
