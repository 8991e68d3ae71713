"""
Встроенные логи шагов Хопкрофта–Карпа и ожидаемые итоги для них.
"""

from __future__ import annotations

from typing import Dict, List


def make_demo_logs() -> Dict[str, str]:
    return {
        "1) perfect_6": """Initialize: (1,2,3 4,5,6)
Add_edge: (1,4) (1,5) (2,4) (3,5) (3,6)
Begin_Phase1
Add_path: (1,4)
Update_match: (1,4)
Add_path: (3,5)
Update_match: (3,5)
Disregard_vertices:
Begin_Phase2
Add_path: (2,4) (1,4) (1,5)
Update_match: (2,4) (1,5)
Disregard_vertices: (3,6)
Maximum matching: 3""",
        "2) star_5": """Initialize: (1 2,3,4,5)
Add_edge: (1,2)(1,3)(1,4)(1,5)
Begin_Phase1
Add_path: (1,2)
Update_match: (1,2)
Disregard_vertices: (1,3) (1,4) (1,5)
Maximum matching: 1""",
        "3) empty_4": """Initialize: (1,2 3,4)
Add_edge:
Begin_Phase1
Disregard_vertices:
Maximum matching: 0""",
        "4) no_result_line": """Initialize: (a,b c,d)
Add_edge: (a,c) (b,d)
Begin_Phase1
Add_path: (a,c)
Update_match: (a,c)
Add_path: (b,d)
Update_match: (b,d)""",
        "5) broken_lines": """Initialize: (1,2 3,4)
Add_edge: (1,3) (2,4)
This line is not a step
Begin_Phase1
Update_match: (3,1)
Update_match: (1,3)
Maximum matching: 1""",
    }


def make_demo_expectations() -> Dict[str, Dict]:
    return {
        "1) perfect_6": dict(left=3, right=3, edges=5, matched=3, phases=["1", "2"], skipped=0, dropped=0),
        "2) star_5": dict(left=1, right=4, edges=4, matched=1, phases=["1"], skipped=0, dropped=0),
        "3) empty_4": dict(left=2, right=2, edges=0, matched=0, phases=["1"], skipped=0, dropped=0),
        "4) no_result_line": dict(left=2, right=2, edges=2, matched=2, phases=["1"], skipped=0, dropped=0),
        # (3,1) ищется не в том порядке, в котором ребро создано
        "5) broken_lines": dict(left=2, right=2, edges=2, matched=1, phases=["1"], skipped=1, dropped=1),
    }


def demo_lines(name: str) -> List[str]:
    return make_demo_logs()[name].splitlines()
