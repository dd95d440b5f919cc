from typing import Tuple, List, Dict, Mapping, Optional, Any

import eth_utils
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_typing.abi import Decodable, TypeStr

from .errors import DecodeError, EncodeError

SHAPES: Dict[str, str] = {
    'symbol': 'symbol()(string)',
    'decimals': 'decimals()(uint8)',
    'balanceOf': 'balanceOf(address)(uint256)',
    'aggregate': 'aggregate((address,bytes)[])(uint256,bytes[])',
}


def _parse_signature(signature: str) -> Tuple[str, List[TypeStr], List[TypeStr]]:
    """
    Breaks 'func(address)(uint256)' into ['func(address)', ['address'], ['uint256']]
    """
    parts: List[str] = []
    stack: List[str] = []
    start: int = 0
    for end, character in enumerate(signature):
        if character == '(':
            stack.append(character)
            if not parts:
                parts.append(signature[start:end])
                start = end
        if character == ')':
            if not stack:
                raise ValueError("Unbalanced parenthesis in '{}'".format(signature))
            stack.pop()
            if not stack:  # we are only interested in outermost groups
                parts.append(signature[start:end + 1])
                start = end + 1
    if stack or len(parts) != 3:
        raise ValueError("Expected 'name(inputs)(outputs)', got '{}'".format(signature))
    function = ''.join(parts[:2])
    input_types = _parse_type_string(parts[1])
    output_types = _parse_type_string(parts[2])
    return function, input_types, output_types


def _parse_type_string(typestring: str) -> List[TypeStr]:
    if typestring == "()":
        return []
    parts = []
    part = ''
    inside_tuples = 0
    for character in typestring[1:-1]:
        if character == "(":
            inside_tuples += 1
        elif character == ")":
            inside_tuples -= 1
        elif character == ',' and inside_tuples == 0:
            parts.append(part)
            part = ''
            continue
        part += character
    parts.append(part)
    return parts


class Shape:
    """Parsed form of one 'name(inputs)(outputs)' signature."""

    def __init__(self, shape_id: str, signature: str):
        self.shape_id = shape_id
        self.signature = signature.replace(" ", "")
        self.function, self.input_types, self.output_types = _parse_signature(self.signature)
        self.selector = eth_utils.function_signature_to_4byte_selector(self.function)

    def __repr__(self):
        return '{} {}'.format(self.shape_id, self.signature)


class SignatureCodec:
    """
    ABI codec over a closed table of function shapes
    """

    def __init__(self, shapes: Optional[Mapping[str, str]] = None):
        """
        :param shapes: (optional) mapping of shape id to 'name(inputs)(outputs)' signature, defaults to SHAPES
        """
        table = SHAPES if shapes is None else shapes
        self.shapes: Dict[str, Shape] = {
            shape_id: Shape(shape_id, signature) for shape_id, signature in table.items()
        }

    def shape(self, shape_id: str) -> Shape:
        try:
            return self.shapes[shape_id]
        except KeyError:
            raise EncodeError(
                "Unknown shape '{}'".format(shape_id),
                EncodeError.ERR_UNKNOWN_SHAPE,
                hint="Known shapes: {}".format(", ".join(sorted(self.shapes))),
            ) from None

    def selector(self, shape_id: str) -> bytes:
        return self.shape(shape_id).selector

    def encode(self, shape_id: str, args: Optional[Any] = None) -> bytes:
        """
        Encode a call as selector + ABI encoded arguments
        :param shape_id: shape to encode against
        :param args: argument list, a single non-sequence argument is wrapped
        :return: call data
        """
        shape = self.shape(shape_id)
        if args is not None and not isinstance(args, (list, tuple)):
            args = (args,)
        args = [] if args is None else list(args)
        if len(args) != len(shape.input_types):
            raise EncodeError(
                "{} expects {} argument(s), got {}".format(shape.function, len(shape.input_types), len(args)),
                EncodeError.ERR_INVALID_ARGS,
            )
        if not args:
            return shape.selector
        try:
            return shape.selector + encode(shape.input_types, args)
        except (EncodingError, TypeError, ValueError) as e:
            raise EncodeError(
                "Cannot encode arguments for {}: {}".format(shape.function, e),
                EncodeError.ERR_INVALID_ARGS,
            ) from e

    def decode(self, shape_id: str, data: Decodable) -> Any:
        """
        Decode return data of a shape
        :return: the bare value for single output shapes, a tuple otherwise
        """
        shape = self.shape(shape_id)
        try:
            decoded = decode(shape.output_types, bytes(data))
        except (DecodingError, UnicodeDecodeError) as e:
            raise DecodeError(
                "Cannot decode {} output as ({}): {}".format(shape.function, ",".join(shape.output_types), e),
                DecodeError.ERR_MALFORMED,
            ) from e
        return decoded if len(decoded) != 1 else decoded[0]
