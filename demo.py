"""
AVL Ordered Set Demo -- Height growth vs the AVL bound, rebalancing scenarios,
operation timing, and position stability under churn.

Generates:
- viz/*.png -- Individual visualization files
- report.pdf -- Summary PDF report
"""

import sys
import time
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

_src = str(Path(__file__).resolve().parent / "src")
if _src not in sys.path:
    sys.path.insert(0, _src)

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

from avl_set import OrderedSet
from avl_set import tree

SEED = 42
SIZES = [100, 300, 1000, 3000, 10000]
ORDERS = ["ascending", "descending", "random"]

VIZ_DIR = Path(__file__).parent / "viz"
REPORT_PATH = Path(__file__).parent / "report.pdf"

COLORS = {
    "blue": "#3498db",
    "red": "#e74c3c",
    "orange": "#f39c12",
    "green": "#27ae60",
    "purple": "#9b59b6",
    "dark": "#2c3e50",
}

SCENARIOS = [
    ("Mixed insert", [5, 3, 8, 1, 4, 7, 9], []),
    ("Ascending insert", [10, 20, 30, 40, 50], []),
    ("Erase two-child root", [5, 3, 8, 1, 4, 7, 9], [5]),
    ("Erase forces rotation", [50, 30, 70, 20, 40, 60, 80, 10], [60, 70, 80]),
]


def avl_height_bound(n: np.ndarray) -> np.ndarray:
    """
    Worst-case AVL height for n keys (leaf height 1).

    Follows from the minimal AVL tree of height h holding F(h+2) - 1 nodes:
    h < log_phi(sqrt(5) (n + 2)) - 2 ~= 1.4405 log2(n + 2) - 0.3277.
    """
    n = np.asarray(n, dtype=float)
    return 1.4405 * np.log2(n + 2) - 0.3277


def _insert_order(order: str, n: int, seed: int) -> np.ndarray:
    if order == "ascending":
        return np.arange(n)
    if order == "descending":
        return np.arange(n)[::-1]
    if order == "random":
        return np.random.RandomState(seed).permutation(n)
    raise ValueError(f"unknown insert order: {order}")


def height_profile(order: str, n: int, seed: int = SEED) -> np.ndarray:
    """Tree height after each of n inserts made in the given order."""
    keys = _insert_order(order, n, seed)
    s: OrderedSet[int] = OrderedSet()
    heights = np.empty(n, dtype=int)
    for i, key in enumerate(keys):
        s.insert(int(key))
        heights[i] = s.height()
    return heights


def time_operations(sizes: Sequence[int], seed: int = SEED) -> Dict[str, np.ndarray]:
    """
    Mean wall-clock cost per operation, in microseconds, for each set size.

    Keys are a random permutation of 0..n-1; queries are drawn from
    0..2n-1 so about half of them miss.
    """
    rng = np.random.RandomState(seed)
    results: Dict[str, List[float]] = {"insert": [], "find": [], "lower_bound": [], "erase": []}

    for n in sizes:
        keys = [int(k) for k in rng.permutation(n)]
        queries = [int(q) for q in rng.randint(0, 2 * n, size=n)]
        s: OrderedSet[int] = OrderedSet()

        t0 = time.perf_counter()
        for key in keys:
            s.insert(key)
        results["insert"].append((time.perf_counter() - t0) / n * 1e6)

        t0 = time.perf_counter()
        for q in queries:
            s.find(q)
        results["find"].append((time.perf_counter() - t0) / n * 1e6)

        t0 = time.perf_counter()
        for q in queries:
            s.lower_bound(q)
        results["lower_bound"].append((time.perf_counter() - t0) / n * 1e6)

        t0 = time.perf_counter()
        for key in keys:
            s.erase(key)
        results["erase"].append((time.perf_counter() - t0) / n * 1e6)

    out = {name: np.array(values) for name, values in results.items()}
    out["sizes"] = np.array(sizes)
    return out


def churn_survival(n: int, rounds: int, seed: int = SEED) -> np.ndarray:
    """
    Fraction of tracked positions still correct after each churn round.

    Every tenth key is tracked through a Position. Each round erases a batch
    of untracked keys and inserts fresh ones; a tracked position is correct
    when it still reads its key and its neighbours match the sorted order.
    """
    rng = np.random.RandomState(seed)
    s: OrderedSet[int] = OrderedSet(range(n))
    tracked = {key: s.find(key) for key in range(0, n, 10)}
    next_key = n
    survival = np.empty(rounds)

    for r in range(rounds):
        candidates = [key for key in s if key not in tracked]
        batch = rng.choice(len(candidates), size=min(len(candidates), n // 10), replace=False)
        for index in batch:
            s.erase(candidates[index])
        for _ in range(n // 10):
            s.insert(next_key)
            next_key += 1
        s.check_invariants()

        ordered = list(s)
        rank = {key: i for i, key in enumerate(ordered)}
        correct = 0
        for key, position in tracked.items():
            i = rank[key]
            after = position.next()
            expected_after = ordered[i + 1] if i + 1 < len(ordered) else None
            if position.key != key:
                continue
            if (after.key if not after.is_end else None) != expected_after:
                continue
            if i > 0 and position.prev().key != ordered[i - 1]:
                continue
            correct += 1
        survival[r] = correct / len(tracked)

    return survival


def tree_layout(s: OrderedSet) -> List[Tuple[object, int, int, object]]:
    """(key, in-order index, depth, parent key) for every node of the set."""
    layout = []
    for index, node in enumerate(tree.iter_nodes(s._root)):
        depth = 0
        parent = node.parent
        while parent is not None:
            depth += 1
            parent = parent.parent
        parent_key = node.parent.key if node.parent is not None else None
        layout.append((node.key, index, depth, parent_key))
    return layout


# ---------------------------------------------------------------------------
# Example 1: Height Growth
# ---------------------------------------------------------------------------
def example_1_height_growth():
    """Compare heights under adversarial and random insert orders."""
    print("=" * 60)
    print("Example 1: Height Growth vs AVL Bound")
    print("=" * 60)

    n = SIZES[-1]
    ns = np.arange(1, n + 1)
    bound = avl_height_bound(ns)
    profiles = {order: height_profile(order, n) for order in ORDERS}

    for order, heights in profiles.items():
        print(f"  {order:>10}: final height {heights[-1]:3d}  "
              f"(bound {bound[-1]:.2f}, log2(n) = {np.log2(n):.2f})")
        assert np.all(heights <= bound), f"{order} insert exceeded the AVL bound"

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))
    colors = [COLORS["blue"], COLORS["red"], COLORS["green"]]
    for (order, heights), color in zip(profiles.items(), colors):
        axes[0].plot(ns, heights, label=order, color=color, linewidth=1.5)
    axes[0].plot(ns, bound, "--", color=COLORS["dark"], label="AVL bound")
    axes[0].plot(ns, np.log2(ns + 1), ":", color=COLORS["orange"], label="perfect tree")
    axes[0].set_xscale("log")
    axes[0].set_xlabel("Keys inserted")
    axes[0].set_ylabel("Tree height")
    axes[0].set_title("Height after each insert", fontsize=11, fontweight="bold")
    axes[0].legend(fontsize=9)
    axes[0].grid(True, alpha=0.3)

    ratio = profiles["random"] / np.log2(ns + 1)
    axes[1].plot(ns, ratio, color=COLORS["purple"])
    axes[1].axhline(1.4405, linestyle="--", color=COLORS["dark"], label="1.44 (worst case)")
    axes[1].set_xscale("log")
    axes[1].set_xlabel("Keys inserted")
    axes[1].set_ylabel("height / log2(n + 1)")
    axes[1].set_title("Random insert: height relative to optimal", fontsize=11, fontweight="bold")
    axes[1].legend(fontsize=9)
    axes[1].grid(True, alpha=0.3)

    plt.tight_layout()
    fig.savefig(VIZ_DIR / "01_height_growth.png", dpi=150, bbox_inches="tight")
    plt.close(fig)


# ---------------------------------------------------------------------------
# Example 2: Rebalancing Scenarios
# ---------------------------------------------------------------------------
def example_2_rebalancing():
    """Draw the tree shape produced by small insert/erase sequences."""
    print("\n" + "=" * 60)
    print("Example 2: Rebalancing Scenarios")
    print("=" * 60)

    fig, axes = plt.subplots(1, len(SCENARIOS), figsize=(5 * len(SCENARIOS), 4))
    for ax, (name, inserts, erases) in zip(axes, SCENARIOS):
        s: OrderedSet[int] = OrderedSet(inserts)
        for key in erases:
            s.erase(key)
        s.check_invariants()
        print(f"\n  {name}")
        print(f"    inserted:  {inserts}")
        print(f"    erased:    {erases}")
        print(f"    in-order:  {s.in_order()}")
        print(f"    pre-order: {s.pre_order()}")
        print(f"    height:    {s.height()}")

        layout = tree_layout(s)
        coords = {key: (x, -depth) for key, x, depth, _ in layout}
        for key, x, depth, parent_key in layout:
            if parent_key is not None:
                px, py = coords[parent_key]
                ax.plot([px, x], [py, -depth], color=COLORS["dark"], linewidth=1, zorder=1)
        for key, x, depth, _ in layout:
            ax.scatter(x, -depth, s=500, color=COLORS["blue"], edgecolor="white", zorder=2)
            ax.text(x, -depth, str(key), ha="center", va="center",
                    color="white", fontsize=9, fontweight="bold", zorder=3)
        ax.set_title(f"{name}\nheight={s.height()}", fontsize=10, fontweight="bold")
        ax.axis("off")

    plt.tight_layout()
    fig.savefig(VIZ_DIR / "02_rebalancing.png", dpi=150, bbox_inches="tight")
    plt.close(fig)


# ---------------------------------------------------------------------------
# Example 3: Timing
# ---------------------------------------------------------------------------
def example_3_timing():
    """Per-operation cost should grow like log n."""
    print("\n" + "=" * 60)
    print("Example 3: Operation Timing")
    print("=" * 60)

    timings = time_operations(SIZES)
    sizes = timings["sizes"]
    print(f"\n  {'n':>7} {'insert':>9} {'find':>9} {'lower_bnd':>9} {'erase':>9}  (us/op)")
    for i, n in enumerate(sizes):
        print(f"  {n:>7} {timings['insert'][i]:>9.2f} {timings['find'][i]:>9.2f} "
              f"{timings['lower_bound'][i]:>9.2f} {timings['erase'][i]:>9.2f}")

    fig, ax = plt.subplots(figsize=(8, 5))
    for name, color in zip(["insert", "find", "lower_bound", "erase"],
                           [COLORS["blue"], COLORS["green"], COLORS["orange"], COLORS["red"]]):
        ax.plot(sizes, timings[name], "o-", label=name, color=color)
    reference = np.log2(sizes) * timings["find"][0] / np.log2(sizes[0])
    ax.plot(sizes, reference, "--", color=COLORS["dark"], label="log n reference")
    ax.set_xscale("log")
    ax.set_xlabel("Set size n")
    ax.set_ylabel("Microseconds per operation")
    ax.set_title("Per-operation cost", fontsize=11, fontweight="bold")
    ax.legend(fontsize=9)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    fig.savefig(VIZ_DIR / "03_timing.png", dpi=150, bbox_inches="tight")
    plt.close(fig)


# ---------------------------------------------------------------------------
# Example 4: Position Stability
# ---------------------------------------------------------------------------
def example_4_position_stability():
    """Positions on surviving keys keep working through erases and rotations."""
    print("\n" + "=" * 60)
    print("Example 4: Position Stability Under Churn")
    print("=" * 60)

    rounds = 30
    survival = churn_survival(1000, rounds)
    print(f"\n  Tracked positions correct after every round: {bool(np.all(survival == 1.0))}")
    print(f"  Minimum survival fraction: {survival.min():.3f}")
    assert np.all(survival == 1.0), "a position on a surviving key was disturbed"

    fig, ax = plt.subplots(figsize=(8, 4))
    ax.bar(np.arange(1, rounds + 1), survival, color=COLORS["green"], edgecolor="white")
    ax.set_ylim(0, 1.05)
    ax.set_xlabel("Churn round")
    ax.set_ylabel("Fraction of tracked positions valid")
    ax.set_title("Positions survive unrelated erases", fontsize=11, fontweight="bold")
    ax.grid(True, alpha=0.3, axis="y")

    plt.tight_layout()
    fig.savefig(VIZ_DIR / "04_position_stability.png", dpi=150, bbox_inches="tight")
    plt.close(fig)


# ---------------------------------------------------------------------------
# PDF Report
# ---------------------------------------------------------------------------
def generate_pdf_report():
    """Title page followed by one page per visualization."""
    print("\n" + "=" * 60)
    print("Generating PDF Report")
    print("=" * 60)

    viz_files = sorted(VIZ_DIR.glob("*.png"))

    with PdfPages(str(REPORT_PATH)) as pdf:
        fig, ax = plt.subplots(figsize=(11, 8.5))
        ax.axis("off")
        ax.text(0.5, 0.78, "AVL Ordered Set", fontsize=28, fontweight="bold",
                ha="center", va="center", transform=ax.transAxes)
        ax.text(0.5, 0.68, "Logarithmic height, stable positions",
                fontsize=13, ha="center", va="center", transform=ax.transAxes, color="gray")
        info_text = (
            "An AVL tree keeps |h(left) - h(right)| <= 1 at every node, which bounds\n"
            "its height by 1.44 log2(n + 2). Parent links let a position step to\n"
            "its successor or predecessor without a stack, and erasing a node with two\n"
            "children moves the successor node itself, so other positions stay valid.\n\n"
            "This demo covers:\n"
            "  1. Height growth for ascending, descending and random inserts\n"
            "  2. Tree shapes after rebalancing scenarios\n"
            "  3. Per-operation timing across set sizes\n"
            "  4. Position stability under insert/erase churn\n\n"
            f"Random seed: {SEED}\n"
            f"Number of visualizations: {len(viz_files)}"
        )
        ax.text(0.5, 0.32, info_text, fontsize=11, ha="center", va="center",
                transform=ax.transAxes, linespacing=1.6)
        ax.text(0.5, 0.06, "Generated by demo.py", fontsize=10, ha="center",
                va="center", transform=ax.transAxes, style="italic", color="gray")
        pdf.savefig(fig)
        plt.close(fig)

        titles = {
            "01_height_growth.png": "Example 1: Height Growth vs AVL Bound",
            "02_rebalancing.png": "Example 2: Rebalancing Scenarios",
            "03_timing.png": "Example 3: Operation Timing",
            "04_position_stability.png": "Example 4: Position Stability Under Churn",
        }

        for viz_file in viz_files:
            fig = plt.figure(figsize=(11, 8.5))
            title = titles.get(viz_file.name, viz_file.stem.replace("_", " ").title())
            fig.suptitle(title, fontsize=14, fontweight="bold", y=0.98)

            img = plt.imread(str(viz_file))
            ax = fig.add_axes([0.02, 0.02, 0.96, 0.92])
            ax.imshow(img)
            ax.axis("off")

            pdf.savefig(fig)
            plt.close(fig)

    print(f"  Report saved: report.pdf ({len(viz_files) + 1} pages)")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main():
    print("AVL Ordered Set Demo")
    print("=" * 60)
    print(f"Seed: {SEED}")
    print(f"Sizes: {SIZES}")
    print()

    VIZ_DIR.mkdir(exist_ok=True)
    np.random.seed(SEED)

    example_1_height_growth()
    example_2_rebalancing()
    example_3_timing()
    example_4_position_stability()
    generate_pdf_report()

    print("\n" + "=" * 60)
    print("All examples completed successfully.")
    print(f"Visualizations: {VIZ_DIR}/")
    print(f"Report: {REPORT_PATH}")
    print("=" * 60)


if __name__ == "__main__":
    main()
