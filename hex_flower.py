"""
hex_flower.py - Hex flower layouts and super-hex labelling

A hex flower is a center hex plus two rings (6 + 12 hexes), 19 slots in
all, numbered like this when the flower starts North and runs clockwise:

             9
         8       10
    19       2       11
         7       3
    18       1       12
         6       4
    17       5       13
         16      14
             15

Flowers themselves tile a flower-of-flowers: 19 super-hexes lettered
A (center), B-G (inner ring) and H-S (outer ring, starting north-north-west)
in the same topology one level up.
"""

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple, Union


class FlowerDirection(IntEnum):
    """Cardinal direction the flower's North slot is rotated to (60° apart)."""
    NORTH = 1
    NORTHEAST = 2
    SOUTHEAST = 3
    SOUTH = 4
    SOUTHWEST = 5
    NORTHWEST = 6

    @classmethod
    def parse(cls, value: Union[str, int, 'FlowerDirection']) -> 'FlowerDirection':
        """Accept a direction name (any case), its abbreviation, or 1-6."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text.isdigit() and 1 <= int(text) <= 6:
            return cls(int(text))
        if text in _DIRECTION_NAMES:
            return _DIRECTION_NAMES[text]
        raise ValueError(f"Unknown flower direction: {value!r}")


_DIRECTION_NAMES = {
    "north": FlowerDirection.NORTH, "n": FlowerDirection.NORTH,
    "northeast": FlowerDirection.NORTHEAST, "ne": FlowerDirection.NORTHEAST,
    "southeast": FlowerDirection.SOUTHEAST, "se": FlowerDirection.SOUTHEAST,
    "south": FlowerDirection.SOUTH, "s": FlowerDirection.SOUTH,
    "southwest": FlowerDirection.SOUTHWEST, "sw": FlowerDirection.SOUTHWEST,
    "northwest": FlowerDirection.NORTHWEST, "nw": FlowerDirection.NORTHWEST,
}


@dataclass(frozen=True)
class HexMapping:
    """One flower hex: the label to show and its 4-digit coordinate."""
    display_value: str
    coordinate: str


# Super-hex letters in flower order
SEQUENCE = [chr(c) for c in range(ord('A'), ord('S') + 1)]

# Offsets relative to the center slot, y grows downward
BASE_POSITIONS: Dict[str, Tuple[int, int]] = {
    "1": (0, 0),     # Center
    "2": (0, -1),    # North
    "3": (1, 0),     # Northeast
    "4": (1, 1),     # Southeast
    "5": (0, 1),     # South
    "6": (-1, 1),    # Southwest
    "7": (-1, 0),    # Northwest
    "8": (-1, -1),   # North-northwest
    "9": (0, -2),    # North
    "10": (1, -1),   # North-northeast
    "11": (2, -1),   # Northeast
    "12": (2, 0),    # East-southeast
    "13": (2, 1),    # Southeast
    "14": (1, 2),    # South-southeast
    "15": (0, 2),    # South
    "16": (-1, 2),   # South-southwest
    "17": (-2, 1),   # Southwest
    "18": (-2, 0),   # West-northwest
    "19": (-2, -1),  # Northwest
}

INNER_RING = ["2", "3", "4", "5", "6", "7"]
OUTER_RING = ["8", "9", "10", "11", "12", "13", "14", "15", "16", "17", "18", "19"]

# Outer slots straight out from the center in each direction; these face
# the neighboring super-hexes (N, NE, SE, S, SW, NW)
CONNECTOR_SLOTS = ["9", "11", "13", "15", "17", "19"]

# The 12 outer slots share 6 display numbers, one per compass direction
OUTER_NUMBERS = {
    "8": "8", "9": "8",
    "10": "9", "11": "9",
    "12": "10", "13": "10",
    "14": "11", "15": "11",
    "16": "12", "17": "12",
    "18": "13", "19": "13",
}

# Neighbors of each super-hex, clockwise from its own North.
# None marks an open border on the edge of the flower-of-flowers.
ADJACENCY: Dict[str, List[Optional[str]]] = {
    'A': ['B', 'C', 'D', 'E', 'F', 'G'],
    'B': ['I', 'J', 'C', 'A', 'G', 'H'],
    'C': ['J', 'K', 'L', 'D', 'A', 'B'],
    'D': ['C', 'L', 'M', 'N', 'E', 'A'],
    'E': ['A', 'D', 'N', 'O', 'P', 'F'],
    'F': ['G', 'A', 'E', 'P', 'Q', 'R'],
    'G': ['H', 'B', 'A', 'F', 'R', 'S'],
    'H': [None, 'I', 'B', 'G', 'S', None],
    'I': [None, None, 'J', 'B', 'H', None],
    'J': [None, None, 'K', 'C', 'B', 'I'],
    'K': [None, None, None, 'L', 'C', 'J'],
    'L': ['K', None, None, 'M', 'D', 'C'],
    'M': ['L', None, None, None, 'N', 'D'],
    'N': ['D', 'M', None, None, 'O', 'E'],
    'O': ['E', 'N', None, None, None, 'P'],
    'P': ['F', 'E', 'O', None, None, 'Q'],
    'Q': ['R', 'F', 'P', None, None, None],
    'R': ['S', 'G', 'F', 'Q', None, None],
    'S': [None, 'H', 'G', 'R', None, None],
}

OPEN_BORDER = None

_CENTER_RE = re.compile(r"(\d{2})(\d{2})")


def letter_index(letter: str) -> int:
    """Position of a super-hex letter in SEQUENCE, -1 if unknown."""
    try:
        return SEQUENCE.index(letter)
    except ValueError:
        return -1


def letter_from_index(index: int) -> str:
    """Super-hex letter at index, wrapping around in both directions."""
    return SEQUENCE[index % len(SEQUENCE)]


def _ring_order(ring: list, start_dir: FlowerDirection, counterclockwise: bool, step: int = 1) -> list:
    """
    Traversal order of a ring after spinning the flower to start_dir.

    Counterclockwise keeps the first entry and reverses the rest. Each
    60° turn shifts the ring right by step entries.
    """
    order = list(ring)
    if counterclockwise:
        order = order[:1] + order[:0:-1]
    shift = ((start_dir - 1) * step) % len(order)
    if shift:
        order = order[-shift:] + order[:-shift]
    return order


def rotate_positions(
    positions: Dict[str, Tuple[int, int]],
    start_dir: FlowerDirection,
    counterclockwise: bool = False
) -> Dict[str, Tuple[int, int]]:
    """
    Spin a flower so its North slot points at start_dir.

    Args:
        positions: Slot number -> offset for the canonical flower
        start_dir: Direction the North slot is turned towards
        counterclockwise: Number the rings counterclockwise instead

    Returns:
        Slot number -> offset that slot occupies after the spin. The
        center never moves; the inner ring turns one slot per 60° and the
        outer ring two.
    """
    rotated = {"1": positions["1"]}
    inner = _ring_order(INNER_RING, start_dir, counterclockwise)
    # The outer ring pivots on slot 9 (due North), not on slot 8
    outer = _ring_order(OUTER_RING[1:] + OUTER_RING[:1], start_dir, counterclockwise, step=2)
    outer = outer[-1:] + outer[:-1]
    for slot, canonical in zip(inner, INNER_RING):
        rotated[slot] = positions[canonical]
    for slot, canonical in zip(outer, OUTER_RING):
        rotated[slot] = positions[canonical]
    return rotated


def connector_order(start_dir: FlowerDirection, counterclockwise: bool = False) -> List[str]:
    """Connector slots in the order their neighbors are looked up."""
    return _ring_order(CONNECTOR_SLOTS, start_dir, counterclockwise)


def get_connected_letter(
    base_letter: str,
    position: int,
    counterclockwise: bool,
    start_dir: FlowerDirection
) -> Union[str, None]:
    """
    Super-hex bordering a connector slot of base_letter's flower.

    Args:
        base_letter: Super-hex letter A-S
        position: Index into connector_order(); wraps modulo 6
        counterclockwise: Traversal direction of the flower
        start_dir: Direction the flower was spun to

    Returns:
        The neighboring letter, OPEN_BORDER at the edge of the
        flower-of-flowers, or "{base_letter}{position}" for an unknown letter.
    """
    neighbors = ADJACENCY.get(base_letter)
    if neighbors is None:
        return f"{base_letter}{position}"
    return _ring_order(neighbors, start_dir, counterclockwise)[position % 6]


def format_coordinate(x: int, y: int) -> str:
    """Two zero-padded digits per axis, e.g. (3, 7) -> "0307"."""
    return f"{x:02d}{y:02d}"


def parse_coordinate(coordinate: str) -> Optional[Tuple[int, int]]:
    """Split "XXYY" into integers, None unless exactly four digits."""
    if not isinstance(coordinate, str):
        return None
    match = _CENTER_RE.fullmatch(coordinate.strip())
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def calculate_hex_flower(
    letter: str,
    center_coord: str,
    counterclockwise: bool = False,
    start_dir: FlowerDirection = FlowerDirection.NORTH,
    relabel_outer_ring: bool = False
) -> List[HexMapping]:
    """
    Lay out the 19 hexes of one flower around center_coord.

    Args:
        letter: Super-hex letter used as the label prefix
        center_coord: Center hex as "XXYY"
        counterclockwise: Number the rings counterclockwise
        start_dir: Direction the North slot is turned towards; integers
            wrap modulo 6, strings go through FlowerDirection.parse()
        relabel_outer_ring: Label connector slots with the bordering super-hex

    Returns:
        19 HexMapping entries in slot order, or [] for a malformed center.
        Center is "{letter}1", inner ring "{letter}2".."{letter}7", outer
        ring "{letter}8".."{letter}13". With relabelling, a connector slot
        facing another super-hex shows the pair "{letter}{neighbor}".
    """
    center = parse_coordinate(center_coord)
    if center is None:
        return []
    center_x, center_y = center
    if isinstance(start_dir, int):
        # Integer directions wrap around the six compass points
        start_dir = FlowerDirection((int(start_dir) - 1) % 6 + 1)
    else:
        start_dir = FlowerDirection.parse(start_dir)

    positions = rotate_positions(BASE_POSITIONS, start_dir, counterclockwise)

    connectors = {}
    if relabel_outer_ring and letter in ADJACENCY:
        for index, slot in enumerate(connector_order(start_dir, counterclockwise)):
            connectors[slot] = get_connected_letter(letter, index, counterclockwise, start_dir)

    mappings = []
    for slot in BASE_POSITIONS:
        dx, dy = positions[slot]
        if slot == "1" or slot in INNER_RING:
            display = f"{letter}{slot}"
        elif connectors.get(slot) is not None:
            display = f"{letter}{connectors[slot]}"
        else:
            display = f"{letter}{OUTER_NUMBERS[slot]}"
        mappings.append(HexMapping(
            display_value=display,
            coordinate=format_coordinate(center_x + dx, center_y + dy),
        ))
    return mappings
