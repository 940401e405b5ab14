"""Pattern scanner — findings model, confidence heuristics, matcher."""
