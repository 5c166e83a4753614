"""Corelib paths and type names the matchers recognize."""

SOME = "core::option::Option::Some"
NONE = "core::option::Option::None"
OK = "core::result::Result::Ok"
ERR = "core::result::Result::Err"
TRUE = "core::bool::True"
FALSE = "core::bool::False"

PANIC_WITH_FELT252 = "core::panic_with_felt252"
PANIC = "core::panics::panic"
PANIC_MACRO = "panic"
ASSERT_MACRO = "assert"

DEFAULT = "core::traits::Default::default"
ARRAY_NEW = "core::array::ArrayTrait::new"

SYSCALL_RESULT = "starknet::SyscallResult"
SYSCALL_RESULT_TRAIT = "starknet::SyscallResultTrait"
SYSCALL_RESULT_EXPANDED = "core::result::Result::<"
SYSCALL_ERROR_TYPE = "core::array::Array::<core::felt252>"

OPTION_TYPE_PREFIX = "core::option::Option::<"
SPAN_TYPE = "core::array::Span"
ARRAY_TYPE = "core::array::Array"

BOOL_TYPE = "core::bool"
FELT252_TYPE = "core::felt252"
NEVER_TYPE = "core::never"

INTEGER_TYPES = frozenset(
    {
        "core::integer::u8",
        "core::integer::u16",
        "core::integer::u32",
        "core::integer::u64",
        "core::integer::u128",
        "core::integer::u256",
        "core::integer::i8",
        "core::integer::i16",
        "core::integer::i32",
        "core::integer::i64",
        "core::integer::i128",
        "core::integer::usize",
    }
)

PRIMITIVE_TYPES = INTEGER_TYPES | {BOOL_TYPE, FELT252_TYPE}

# Variant paired with the other arm of a two-arm Option / Result match.
COMPLEMENT = {SOME: NONE, NONE: SOME, OK: ERR, ERR: OK}

ALL_RULES = "all"
UNKNOWN_LINT = "unknown_lint"
