"""Example pipeline: count team members per skill and lay the skills out as a Venn diagram."""

from venn_layout import CollectingObserver, LayoutOptions, VennDiagram

MEMBERS = [
    {"name": "ana", "set": ["robotics"]},
    {"name": "ben", "set": ["robotics", "vision"]},
    {"name": "chen", "set": ["vision"]},
    {"name": "dara", "set": ["vision", "planning"]},
    {"name": "eli", "set": ["planning"]},
    {"name": "fay", "set": ["robotics", "vision", "planning"]},
    {"name": "gus", "set": ["robotics"]},
    {"name": "hana", "set": ["simulation"]},
]


def main() -> None:
    observer = CollectingObserver()
    diagram = VennDiagram(
        LayoutOptions(width=600, height=350, random_seed=123),
        observer=observer,
        scatter=True,
    ).compute(MEMBERS)

    print(f"Loss: {diagram.loss:.6f}")
    print("Circles:")
    for setid, circle in diagram.circles.items():
        print(f"  {setid}: ({circle.x:.2f}, {circle.y:.2f}) r={circle.radius:.2f}")

    print("Regions:")
    for key, entry in diagram.sets.items():
        centre = entry.center
        outline = diagram.outline(key)
        print(
            f"  {key}: size={entry.size} label=({centre.x:.2f}, {centre.y:.2f}) "
            f"inner_radius={entry.inner_radius:.2f} outline={outline.kind}"
        )
        for node, point in zip(entry.nodes, entry.node_positions):
            print(f"    {node['name']}: ({point.x:.2f}, {point.y:.2f})")

    if observer.warnings:
        print("Warnings:")
        for warning in observer.warnings:
            print(f"  - {warning.code}: {warning.message}")


if __name__ == "__main__":
    main()
