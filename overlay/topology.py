"""
Landmark topologies: which landmark indices are joined by a drawn line.

Hand indices follow the 21-point MediaPipe hand model; face indices follow the
468-point face mesh, with irises at 468-477 (present in 478-point meshes only).
"""

from __future__ import annotations

Edge = tuple[int, int]

HAND_CONNECTIONS: tuple[Edge, ...] = (
    # Thumb
    (1, 2), (2, 3), (3, 4),
    # Index
    (5, 6), (6, 7), (7, 8),
    # Middle
    (9, 10), (10, 11), (11, 12),
    # Ring
    (13, 14), (14, 15), (15, 16),
    # Pinky
    (17, 18), (18, 19), (19, 20),
    # Palm
    (0, 1), (0, 5), (5, 9), (9, 13), (13, 17), (17, 0),
)

FACE_OVAL: tuple[Edge, ...] = (
    (10, 338), (338, 297), (297, 332), (332, 284), (284, 251),
    (251, 389), (389, 356), (356, 454), (454, 323), (323, 361),
    (361, 288), (288, 397), (397, 365), (365, 379), (379, 378),
    (378, 400), (400, 377), (377, 152), (152, 148), (148, 176),
    (176, 149), (149, 150), (150, 136), (136, 172), (172, 58),
    (58, 132), (132, 93), (93, 234), (234, 127), (127, 162),
    (162, 21), (21, 54), (54, 103), (103, 67), (67, 109),
    (109, 10),
)

LIPS: tuple[Edge, ...] = (
    (61, 146), (146, 91), (91, 181), (181, 84), (84, 17), (17, 314),
    (314, 405), (405, 321), (321, 375), (375, 291), (61, 185),
    (185, 40), (40, 39), (39, 37), (37, 0), (0, 267),
    (267, 269), (269, 270), (270, 409), (409, 291),
)

LEFT_EYE: tuple[Edge, ...] = (
    (33, 7), (7, 163), (163, 144), (144, 145), (145, 153),
    (153, 154), (154, 155), (155, 133), (33, 246), (246, 161),
    (161, 160), (160, 159), (159, 158), (158, 157), (157, 173),
    (173, 133),
)

RIGHT_EYE: tuple[Edge, ...] = (
    (263, 249), (249, 390), (390, 373), (373, 374), (374, 380),
    (380, 381), (381, 382), (382, 362), (263, 466), (466, 388),
    (388, 387), (387, 386), (386, 385), (385, 384), (384, 398),
    (398, 362),
)

LEFT_EYEBROW: tuple[Edge, ...] = (
    (46, 53), (53, 52), (52, 65), (65, 55), (55, 107),
)

RIGHT_EYEBROW: tuple[Edge, ...] = (
    (276, 283), (283, 282), (282, 295), (295, 285), (285, 336),
)

LEFT_IRIS: tuple[Edge, ...] = (
    (474, 475), (475, 476), (476, 477), (477, 474),
)

RIGHT_IRIS: tuple[Edge, ...] = (
    (469, 470), (470, 471), (471, 472), (472, 469),
)
