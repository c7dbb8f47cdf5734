#!/usr/bin/env python3
"""
JSON-lines front end.

One request object per stdin line, one response per stdout line:

    {"cmd": "analyze", "key": {"tonic": "C", "mode": "major"}, "romans": ["ii", "V", "I"], "tag": 7}
    {"result": "analyze", "functions": ["SD", "D", "T"], ..., "tag": 7}
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, Mapping, Optional

from .chords import extended_roman_to_absolute, parse_extended_chord, slash_chord, validate_chord_symbol
from .circle import circle_data, rotate_circle, slot_of
from .classify import classify, classify_progression
from .config import EngineConfig, load_engine_config
from .convert import absolute_to_roman, convert_romans, roman_to_absolute
from .harmony import analyze_progression, describe_tension
from .keys import Key
from .log import configure_logging
from .modulation import circle_distance, describe_interval, key_relationship, plan_transition
from .palette import build_palette, suggest_next
from .scales import compatible_scales, scale_info, scales_containing_notes

LOGGER = logging.getLogger(__name__)

DEFAULT_KEY = {"tonic": "C", "mode": "major"}


def _key(cmd: Mapping[str, Any], field: str = "key") -> Key:
    return Key.from_dict(cmd.get(field, DEFAULT_KEY))


def handle(cmd: Mapping[str, Any], config: Optional[EngineConfig] = None) -> Dict[str, Any]:
    config = config or EngineConfig()
    c      = cmd.get("cmd", "")
    policy = cmd.get("enharmonic_policy", config.enharmonic_policy)

    if c == "ping":
        return {"result": "pong", "status": "ok"}
    elif c == "palette":
        key    = _key(cmd)
        romans = build_palette(key, cmd.get("sevenths", config.sevenths))
        return {"result": "palette", "romans": romans,
                "chords": roman_to_absolute(key.tonic, romans, policy)}
    elif c == "to_absolute":
        details = convert_romans(cmd["tonic"], cmd.get("romans", []), policy)
        return {"result": "to_absolute", "chords": [d["chord"] for d in details], "details": details}
    elif c == "to_roman":
        return {"result": "to_roman", "romans": absolute_to_roman(cmd["tonic"], cmd.get("chords", []))}
    elif c == "classify":
        key = _key(cmd)
        if "roman" in cmd:
            return {"result": "classify", **classify(cmd["roman"], key)}
        return {"result": "classify", "classifications": classify_progression(cmd.get("romans", []), key)}
    elif c == "analyze":
        res = {"result": "analyze", **analyze_progression(cmd.get("romans", []), _key(cmd))}
        for point in res["tension"]:
            point["label"] = describe_tension(point["value"])
        return res
    elif c == "suggest":
        return {"result": "suggest",
                "suggestions": suggest_next(cmd.get("history", []), _key(cmd), cmd.get("style"))}
    elif c == "transition":
        a, b = _key(cmd, "from"), _key(cmd, "to")
        return {"result": "transition", **plan_transition(a, b),
                "relationship": key_relationship(a, b),
                "interval": describe_interval(a, b),
                "circle_distance": circle_distance(a, b)}
    elif c == "circle":
        return {"result": "circle", **circle_data(_key(cmd))}
    elif c == "rotate":
        key = rotate_circle(_key(cmd), cmd.get("direction", "clockwise"), cmd.get("rotate_by", "tonic"))
        return {"result": "rotate", "key": key.to_dict()}
    elif c == "slot":
        slot = slot_of(cmd["note"], cmd.get("mode"), strict=cmd.get("strict", config.strict_slots))
        return {"result": "slot", "note": cmd["note"], "slot": slot}
    elif c == "scale":
        return {"result": "scale", **scale_info(cmd["tonic"], cmd["scale"])}
    elif c == "compatible_scales":
        if "scale" in cmd:
            tonic, scale = cmd["tonic"], cmd["scale"]
        else:
            key = _key(cmd)
            tonic, scale = key.tonic, key.scale_name
        return {"result": "compatible_scales", "scales": compatible_scales(tonic, scale)}
    elif c == "scales_containing":
        return {"result": "scales_containing", "scales": scales_containing_notes(cmd.get("notes", []))}
    elif c == "extended_chord":
        return {"result": "extended_chord", **parse_extended_chord(cmd["chord"])}
    elif c == "validate_chord":
        return {"result": "validate_chord", **validate_chord_symbol(cmd["chord"])}
    elif c == "slash_chord":
        return {"result": "slash_chord", **slash_chord(cmd["chord"], cmd["bass"])}
    elif c == "extended_to_absolute":
        return {"result": "extended_to_absolute",
                "chords": [extended_roman_to_absolute(cmd["tonic"], r) for r in cmd.get("romans", [])]}
    return {"result": "error", "message": f"unknown command: {c}"}


def respond(line: str, config: EngineConfig) -> Optional[Dict[str, Any]]:
    """Decode one request line and produce its response; blank lines give None."""
    if not line.strip():
        return None
    req: Any = None
    try:
        req = json.loads(line)
        if not isinstance(req, dict):
            raise ValueError(f"request must be a JSON object, not {type(req).__name__}")
        res = handle(req, config)
    except Exception as e:
        LOGGER.exception("request failed: %s", line.strip())
        res = {"result": "error", "message": f"{type(e).__name__}: {e}"}
    if isinstance(req, dict) and "tag" in req:
        res["tag"] = req["tag"]
    return res


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="JSON-lines harmonic analysis engine")
    parser.add_argument("--config", default=None, help="YAML file with an 'engine' section")
    parser.add_argument("--log-level", default=None, choices=("quiet", "info", "debug"),
                        help="overrides the config file and FIFTHWHEEL_VERBOSE")
    return parser.parse_args(argv)


def main(argv=None):
    args   = parse_args(argv)
    config = load_engine_config(args.config)
    configure_logging(args.log_level or config.log_level)
    LOGGER.debug("engine config: %s", config)

    for line in sys.stdin:
        res = respond(line, config)
        if res is not None:
            print(json.dumps(res), flush=True)

if __name__ == "__main__":
    main()
