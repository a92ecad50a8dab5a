"""Names and messages shared by the array literal inspection."""

BUILTINS_PACKAGE: str = "kotlin"

ARRAY_OF_FUNCTION: str = "arrayOf"
EMPTY_ARRAY_FUNCTION: str = "emptyArray"

# Kotlin primitive type -> specialized array constructor
PRIMITIVE_TYPE_TO_ARRAY: dict[str, str] = {
    "Boolean": "booleanArrayOf",
    "Char": "charArrayOf",
    "Byte": "byteArrayOf",
    "Short": "shortArrayOf",
    "Int": "intArrayOf",
    "Float": "floatArrayOf",
    "Long": "longArrayOf",
    "Double": "doubleArrayOf",
}

ACCEPTABLE_ARRAY_FUNCTIONS: frozenset[str] = frozenset(
    {ARRAY_OF_FUNCTION, EMPTY_ARRAY_FUNCTION, *PRIMITIVE_TYPE_TO_ARRAY.values()}
)

# Top-level functions declared in the builtins package fragment.
BUILTIN_FUNCTIONS: frozenset[str] = ACCEPTABLE_ARRAY_FUNCTIONS | frozenset(
    {"arrayOfNulls", "enumValues", "enumValueOf"}
)

INSPECTION_ID: str = "ReplaceArrayOfWithLiteral"
INSPECTION_DESCRIPTION: str = (
    "Array constructor call in annotation can be replaced with an array literal [...]"
)
PROBLEM_MESSAGE_TEMPLATE: str = "'{name}' call can be replaced with array literal [...]"
FIX_FAMILY_NAME: str = "Replace with [...]"

CONFIG_SECTION: str = "kt-array-literal"
KOTLIN_SUFFIXES: tuple[str, ...] = (".kt", ".kts")
