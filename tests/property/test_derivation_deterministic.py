import string

from bip_utils import Bip39MnemonicGenerator
from hypothesis import given, settings, strategies as st

from bridge_keystore.chains import CosmosAdapter, EthereumAdapter
from bridge_keystore.core.exceptions import InvalidKeyName
from bridge_keystore.crypto.derivation import derive_from_mnemonic, validate_mnemonic
from bridge_keystore.utils.validation import validate_key_name

_adapters = [CosmosAdapter(), EthereumAdapter()]


@settings(max_examples=15, deadline=None)
@given(
    st.sampled_from([16, 20, 24, 28, 32]).flatmap(lambda size: st.binary(min_size=size, max_size=size)),
    st.sampled_from(_adapters),
    st.integers(min_value=0, max_value=5),
)
def test_derivation_is_deterministic(entropy: bytes, adapter, account: int) -> None:
    mnemonic = Bip39MnemonicGenerator().FromEntropy(entropy).ToStr()
    assert validate_mnemonic(mnemonic) == mnemonic
    first, path = derive_from_mnemonic(mnemonic, adapter, account)
    second, _ = derive_from_mnemonic(mnemonic.upper(), adapter, account)
    assert first == second
    assert path == adapter.derivation_path(account)
    assert 0 < first.to_int() < adapter.curve_order


_name_chars = string.ascii_letters + string.digits + "-_."


@given(st.text(alphabet=_name_chars, min_size=1, max_size=64))
def test_safe_names_accepted_unless_hidden(name: str) -> None:
    if name.startswith("."):
        try:
            validate_key_name(name)
        except InvalidKeyName:
            return
        raise AssertionError("hidden name accepted")
    assert validate_key_name(name) == name


@given(st.text(min_size=1, max_size=32), st.sampled_from(["/", "\\", "\x00"]), st.text(max_size=32))
def test_separators_always_rejected(prefix: str, separator: str, suffix: str) -> None:
    try:
        validate_key_name(prefix + separator + suffix)
    except InvalidKeyName:
        return
    raise AssertionError("name with a path separator accepted")
