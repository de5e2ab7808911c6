"""Example Bevel: small chamfers on surface A, hard edges on surface B."""

from ..generator_settings import GeneratorSettings

EXAMPLE_BEVEL_SETTINGS = GeneratorSettings(
    name="Example Bevel",
    description="Single/double bevel on surface A, square corners on surface B",

    # Cap profiles
    type1_vertical_inside=[  # 1 bevel
        (0.0, -0.5, 0.0), (0.0, -0.1, 0.0), (0.0, -0.1, 0.0),
        (-0.1, 0.0, 0.0), (-0.1, 0.0, 0.0), (-0.5, 0.0, 0.0),
    ],
    type1_vertical_outside=[  # 2 bevel
        (0.0, -0.5, 0.0), (0.0, -0.15, 0.0), (0.0, -0.15, 0.0),
        (-0.05, -0.05, 0.0), (-0.05, -0.05, 0.0),
        (-0.15, 0.0, 0.0), (-0.15, 0.0, 0.0), (-0.5, 0.0, 0.0),
    ],
    type2_vertical_inside=[
        (0.0, -0.5, 0.0), (0.0, 0.0, 0.0),
        (0.0, 0.0, 0.0), (-0.5, 0.0, 0.0),
    ],
    type2_vertical_outside=[
        (0.0, -0.5, 0.0), (0.0, 0.0, 0.0),
        (0.0, 0.0, 0.0), (-0.5, 0.0, 0.0),
    ],
    mixed1_vertical_inside=[(0.0, -0.5, 0.0), (0.0, 0.0, 0.0)],
    mixed2_vertical_inside=[(0.0, 0.0, 0.0), (-0.5, 0.0, 0.0)],

    # Side profiles
    type1_horizontal_inside=[
        (-0.5, 0.0, -0.5), (-0.5, 0.0, -0.1),
        (-0.5, 0.0, -0.1), (-0.5, -0.1, 0.0),
        (-0.5, -0.1, 0.0), (-0.5, -0.5, 0.0),
    ],
    type1_horizontal_outside=[
        (-0.5, 0.0, -0.5), (-0.5, 0.0, -0.15),
        (-0.5, 0.0, -0.15), (-0.5, -0.05, -0.05),
        (-0.5, -0.05, -0.05), (-0.5, -0.15, 0.0),
        (-0.5, -0.15, 0.0), (-0.5, -0.5, 0.0),
    ],
    type2_horizontal_inside=[
        (-0.5, 0.0, -0.5), (-0.5, 0.0, 0.0),
        (-0.5, 0.0, 0.0), (-0.5, -0.5, 0.0),
    ],
    type2_horizontal_outside=[
        (-0.5, 0.0, -0.5), (-0.5, 0.0, 0.0),
        (-0.5, 0.0, 0.0), (-0.5, -0.5, 0.0),
    ],
    mixed_side_vertical_1_inside=[(-0.5, 0.0, -0.5), (-0.5, 0.0, 0.0)],
    mixed_side_horizontal_1_inside=[(-0.5, 0.0, 0.0), (-0.5, -0.5, 0.0)],
    mixed_side_vertical_2_inside=[(-0.5, 0.0, -0.5), (-0.5, 0.0, 0.0)],
    mixed_side_horizontal_2_inside=[(-0.5, 0.0, 0.0), (-0.5, -0.5, 0.0)],
)
