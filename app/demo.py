"""
Tents and Trees Solver - Interactive Demo

Run with: streamlit run app/demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st
from typing import Any, Dict, List, Optional, Sequence, Tuple

from tentsandtrees import (
    GRASS,
    TENT,
    TREE,
    MalformedPuzzleError,
    TentsPuzzle,
    TentsSolver,
    generate_puzzle,
)

PUZZLES_DIR = Path(__file__).parent.parent / "examples" / "puzzles"

# Replay snapshots hold a full grid per visited state.
MAX_REPLAY_DIM = 8


def render_board_html(
    puzzle: TentsPuzzle,
    grid: Sequence[Sequence[str]],
    highlight_cell: Optional[Tuple[int, int]] = None,
) -> str:
    """Render a grid as an HTML table with the row targets on the right and column targets below."""
    # Scale cell size based on board size
    if puzzle.dim >= 20:
        cell_size = 18
        font_size = "11px"
    elif puzzle.dim >= 12:
        cell_size = 24
        font_size = "14px"
    else:
        cell_size = 32
        font_size = "18px"

    styles = {
        TENT: ("&#9650;", "#fff3d6", "#c25e00"),
        TREE: ("&#127795;", "#d9f2d9", "#1b5e20"),
        GRASS: ("", "#b7e4a5", "#2e7d32"),
    }

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for r in range(puzzle.dim):
        html += "<tr>"
        for c in range(puzzle.dim):
            display, bg, text_color = styles.get(grid[r][c], ("", "#f5f5f5", "#666666"))

            # Highlight current cell
            if highlight_cell and (r, c) == highlight_cell:
                border = "3px solid #ff0000"
            else:
                border = "1px solid #999"

            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: {border};
                color: {text_color};
                font-weight: bold;
                font-size: {font_size};
            ">{display}</td>'''
        html += f'<td style="padding-left: 8px; font-weight: bold;">{puzzle.row_targets[r]}</td>'
        html += "</tr>"

    html += "<tr>"
    for target in puzzle.col_targets:
        html += f'<td style="text-align: center; font-weight: bold;">{target}</td>'
    html += "<td></td></tr>"

    html += "</table></div>"
    return html


def load_puzzle(source: str, dim: int, density: float, seed: int, text: str) -> TentsPuzzle:
    """Build the puzzle selected in the sidebar."""
    if source == "Random":
        return generate_puzzle(dim, density=density, seed=seed)
    if source == "Paste":
        return TentsPuzzle.from_text(text)
    return TentsPuzzle.from_file(PUZZLES_DIR / source)


def main():
    st.set_page_config(
        page_title="Tents and Trees Solver",
        page_icon="⛺",
        layout="wide",
    )

    st.title("Tents and Trees Solver")
    st.markdown("""
    A depth-first backtracking solver that decides every cell in turn and prunes
    partial grids as soon as a rule is broken.
    """)

    # Sidebar configuration
    st.sidebar.header("Puzzle")

    samples = sorted(p.name for p in PUZZLES_DIR.glob("*.txt"))
    source = st.sidebar.selectbox("Source", samples + ["Random", "Paste"])

    dim, density, seed, text = 8, 0.5, 0, ""
    if source == "Random":
        dim = st.sidebar.slider("Size", 3, 12, 8)
        density = st.sidebar.slider("Tree density", 0.1, 1.0, 0.5)
        seed = int(st.sidebar.number_input("Seed", min_value=0, value=0, step=1))
    elif source == "Paste":
        text = st.sidebar.text_area(
            "Puzzle definition",
            "3\n2 0 1\n2 0 1\n. % .\n% . .\n. % .\n",
            height=200,
        )

    st.sidebar.header("Solver")
    successor_order = st.sidebar.selectbox(
        "Branch Order",
        ["tent_first", "grass_first"],
        format_func=lambda x: "Tent first (Default)" if x == "tent_first" else "Grass first",
        help="Which decision is tried first at each cell. "
             "Only changes which solution is found when there are several.",
    )
    prune_starved_trees = st.sidebar.checkbox(
        "Prune starved trees early",
        value=True,
        help="Reject a partial grid as soon as a tree's neighbors are all decided without a tent.",
    )

    try:
        puzzle = load_puzzle(source, dim, density, seed, text)
    except MalformedPuzzleError as e:
        st.error(f"Invalid puzzle: {e}")
        return

    # Initialize session state
    if "payload" not in st.session_state:
        st.session_state.payload = None
        st.session_state.status = None
        st.session_state.replay_mode = False
        st.session_state.current_step = 0
        st.session_state.prev_settings = None

    # Drop the previous result when the puzzle or the solver settings change
    current_settings = (puzzle, successor_order, prune_starved_trees)
    if st.session_state.prev_settings != current_settings:
        st.session_state.payload = None
        st.session_state.status = None
        st.session_state.replay_mode = False
        st.session_state.current_step = 0
        st.session_state.prev_settings = current_settings

    col1, col2 = st.columns([2, 1])

    with col1:
        st.subheader("Board")

        if st.button("Solve", type="primary"):
            solver = TentsSolver(
                puzzle,
                successor_order=successor_order,
                prune_starved_trees=prune_starved_trees,
                record_steps=puzzle.dim <= MAX_REPLAY_DIM,
            )
            status, payload = solver.solve()
            st.session_state.status = status
            st.session_state.payload = payload
            st.session_state.replay_mode = False
            st.session_state.current_step = max(len(payload["steps_history"]) - 1, 0)
            st.rerun()

        payload: Optional[Dict[str, Any]] = st.session_state.payload
        steps_history: List[Dict[str, Any]] = payload["steps_history"] if payload else []

        # Replay controls (show only after solving)
        if steps_history:
            st.session_state.replay_mode = st.checkbox(
                "Step-by-Step Replay Mode",
                value=st.session_state.replay_mode,
                key="replay_toggle",
            )

        if st.session_state.replay_mode and steps_history:
            total_steps = len(steps_history)
            step_display = st.slider(
                "Step",
                1,
                total_steps,
                st.session_state.current_step + 1,
                key="step_slider",
            )
            st.session_state.current_step = step_display - 1
            step = steps_history[st.session_state.current_step]

            if step["cell"] is None:
                st.info(f"**Step {step_display}/{total_steps}**: empty grid")
            else:
                r, c = step["cell"]
                st.info(
                    f"**Step {step_display}/{total_steps}**: cell ({r}, {c}) = "
                    f"`{step['value']}` at depth {step['depth']}"
                )
            html = render_board_html(puzzle, step["grid_snapshot"], highlight_cell=step["cell"])
        elif payload and payload["solution"] is not None:
            html = render_board_html(puzzle, payload["solution"])
        else:
            html = render_board_html(puzzle, puzzle.grid)

        st.markdown(html, unsafe_allow_html=True)

        if not st.session_state.replay_mode:
            if st.session_state.status == 1:
                st.success("Solved!")
            elif st.session_state.status == 0:
                st.error("This puzzle has no solution.")

        if payload and puzzle.dim > MAX_REPLAY_DIM:
            st.caption(f"Replay is only recorded for puzzles up to {MAX_REPLAY_DIM}x{MAX_REPLAY_DIM}.")

    with col2:
        st.subheader("Solver Statistics")

        if payload:
            metrics: List[Tuple[str, Any]] = [
                ("Result", "Solved" if st.session_state.status == 1 else "No solution"),
                ("Nodes Expanded", payload["nodes_expanded"]),
                ("States Pruned", payload["states_pruned"]),
                ("Max Depth", payload["max_depth"]),
                ("Time", f"{payload['elapsed_seconds']:.3f}s"),
            ]
            for label, value in metrics:
                st.metric(label, value)

            generated = payload["states_generated"]
            rate = f"{payload['states_pruned'] / generated * 100:.1f}%" if generated > 0 else "N/A"
            st.text(f"Pruned {payload['states_pruned']} of {generated} generated states ({rate})")
        else:
            st.info("Run the solver to see statistics.")

        st.markdown("---")
        st.subheader("Algorithm Info")
        st.markdown("""
        **Checks after each decision:**
        1. A tent may not touch another tent, and needs a tree beside it
        2. A row or column may never exceed its target
        3. A finished row or column must match its target exactly
        4. On the last cell, every tree needs a tent
        """)


if __name__ == "__main__":
    main()
