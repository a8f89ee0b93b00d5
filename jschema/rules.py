"""Read-only rule table describing each kind of diagnostic.

Each rule has an id (``JSON1001``), a name, a default level and a message
format. Message formats use positional placeholders: ``{0}`` is the location
of the offending value and ``{1}``... are the diagnostic's arguments.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from jschema.diagnostics import Diagnostic, ErrorKind, rule_id

ROOT_LOCATION = 'root'


@dataclass(frozen=True)
class Rule:
    id: str
    name: str
    level: str
    description: str
    message_format: str


def _rule(kind: ErrorKind, name: str, description: str, message_format: str) -> Rule:
    return Rule(rule_id(kind), name, 'error', description, message_format)


RULES: Mapping[ErrorKind, Rule] = MappingProxyType({
    ErrorKind.WRONG_TYPE: _rule(
        ErrorKind.WRONG_TYPE, 'WrongType',
        'A value has a type the schema does not permit.',
        "{0}: The value has type '{2}', but the schema requires one of: {1}."),
    ErrorKind.REQUIRED_PROPERTY_MISSING: _rule(
        ErrorKind.REQUIRED_PROPERTY_MISSING, 'RequiredPropertyMissing',
        'An object lacks a property listed in "required".',
        "{0}: The required property '{1}' is missing."),
    ErrorKind.TOO_FEW_ARRAY_ITEMS: _rule(
        ErrorKind.TOO_FEW_ARRAY_ITEMS, 'TooFewArrayItems',
        'An array has fewer elements than "minItems".',
        "{0}: At least {1} items are required, but the array has {2}."),
    ErrorKind.TOO_MANY_ARRAY_ITEMS: _rule(
        ErrorKind.TOO_MANY_ARRAY_ITEMS, 'TooManyArrayItems',
        'An array has more elements than "maxItems".',
        "{0}: At most {1} items are permitted, but the array has {2}."),
    ErrorKind.ADDITIONAL_PROPERTIES_PROHIBITED: _rule(
        ErrorKind.ADDITIONAL_PROPERTIES_PROHIBITED, 'AdditionalPropertiesProhibited',
        'An object has a property the schema does not declare, and additional properties are not allowed.',
        "{0}: The property '{1}' is not permitted by the schema."),
    ErrorKind.VALUE_TOO_LARGE: _rule(
        ErrorKind.VALUE_TOO_LARGE, 'ValueTooLarge',
        'A number is greater than "maximum".',
        "{0}: The value {1} is greater than the maximum value of {2}."),
    ErrorKind.VALUE_TOO_LARGE_EXCLUSIVE: _rule(
        ErrorKind.VALUE_TOO_LARGE_EXCLUSIVE, 'ValueTooLargeExclusive',
        'A number is greater than or equal to an exclusive "maximum".',
        "{0}: The value {1} is greater than or equal to the exclusive maximum value of {2}."),
    ErrorKind.VALUE_TOO_SMALL: _rule(
        ErrorKind.VALUE_TOO_SMALL, 'ValueTooSmall',
        'A number is less than "minimum".',
        "{0}: The value {1} is less than the minimum value of {2}."),
    ErrorKind.VALUE_TOO_SMALL_EXCLUSIVE: _rule(
        ErrorKind.VALUE_TOO_SMALL_EXCLUSIVE, 'ValueTooSmallExclusive',
        'A number is less than or equal to an exclusive "minimum".',
        "{0}: The value {1} is less than or equal to the exclusive minimum value of {2}."),
    ErrorKind.TOO_MANY_PROPERTIES: _rule(
        ErrorKind.TOO_MANY_PROPERTIES, 'TooManyProperties',
        'An object has more properties than "maxProperties".',
        "{0}: At most {1} properties are permitted, but the object has {2}."),
    ErrorKind.TOO_FEW_PROPERTIES: _rule(
        ErrorKind.TOO_FEW_PROPERTIES, 'TooFewProperties',
        'An object has fewer properties than "minProperties".',
        "{0}: At least {1} properties are required, but the object has {2}."),
    ErrorKind.NOT_A_MULTIPLE: _rule(
        ErrorKind.NOT_A_MULTIPLE, 'NotAMultiple',
        'A number is not a multiple of "multipleOf".',
        "{0}: The value {1} is not a multiple of {2}."),
    ErrorKind.STRING_TOO_LONG: _rule(
        ErrorKind.STRING_TOO_LONG, 'StringTooLong',
        'A string is longer than "maxLength".',
        "{0}: The string {1} has length {2}, which is greater than the maximum length of {3}."),
    ErrorKind.STRING_TOO_SHORT: _rule(
        ErrorKind.STRING_TOO_SHORT, 'StringTooShort',
        'A string is shorter than "minLength".',
        "{0}: The string {1} has length {2}, which is less than the minimum length of {3}."),
    ErrorKind.STRING_DOES_NOT_MATCH_PATTERN: _rule(
        ErrorKind.STRING_DOES_NOT_MATCH_PATTERN, 'StringDoesNotMatchPattern',
        'A string does not match "pattern".',
        "{0}: The string {1} does not match the regular expression '{2}'."),
    ErrorKind.NOT_ALL_OF: _rule(
        ErrorKind.NOT_ALL_OF, 'NotAllOf',
        'A value does not validate against every schema in "allOf".',
        "{0}: The value does not validate against all of the {1} schemas in 'allOf'."),
    ErrorKind.NOT_ANY_OF: _rule(
        ErrorKind.NOT_ANY_OF, 'NotAnyOf',
        'A value does not validate against any schema in "anyOf".',
        "{0}: The value does not validate against any of the {1} schemas in 'anyOf'."),
    ErrorKind.NOT_ONE_OF: _rule(
        ErrorKind.NOT_ONE_OF, 'NotOneOf',
        'A value does not validate against exactly one schema in "oneOf".',
        "{0}: The value validates against {1} of the {2} schemas in 'oneOf'; it must validate against exactly one."),
    ErrorKind.INVALID_ENUM_VALUE: _rule(
        ErrorKind.INVALID_ENUM_VALUE, 'InvalidEnumValue',
        'A value is not one of the values listed in "enum".',
        "{0}: The value {1} is not one of the permitted values: {2}."),
    ErrorKind.NOT_UNIQUE: _rule(
        ErrorKind.NOT_UNIQUE, 'NotUnique',
        'An array whose schema requires "uniqueItems" has duplicate elements.',
        "{0}: The array elements are not unique."),
    ErrorKind.TOO_FEW_ITEM_SCHEMAS: _rule(
        ErrorKind.TOO_FEW_ITEM_SCHEMAS, 'TooFewItemSchemas',
        'An array has more elements than "items" has schemas, and "additionalItems" is false.',
        "{0}: The array has {1} elements, but the schema allows at most {2}."),
    ErrorKind.VALIDATES_AGAINST_NOT_SCHEMA: _rule(
        ErrorKind.VALIDATES_AGAINST_NOT_SCHEMA, 'ValidatesAgainstNotSchema',
        'A value validates against the schema in "not".',
        "{0}: The value validates against the schema specified by 'not'."),
    ErrorKind.DEPENDENT_PROPERTY_MISSING: _rule(
        ErrorKind.DEPENDENT_PROPERTY_MISSING, 'DependentPropertyMissing',
        'An object has a property whose listed dependencies are not all present.',
        "{0}: The property '{1}' requires the properties {2}, but {3} are missing."),
})


def format_message(diagnostic: Diagnostic) -> str:
    """Returns the message text for *diagnostic*, prefixed with its rule id."""
    rule = RULES[diagnostic.error_code]
    location = diagnostic.path or ROOT_LOCATION
    message = rule.message_format.format(location, *diagnostic.args)
    return f"{rule.id}: {message}"


# Command entry point for the jschema CLI
def print_rules() -> None:
    """Prints the rule table."""
    for rule in RULES.values():
        print(f"{rule.id}  {rule.name}  [{rule.level}]")
        print(f"    {rule.description}")
        print(f"    {rule.message_format}")
