import pytest

from mcl_labs.simulation import IdealCamera, Landmark, Map


def test_ids_follow_insertion_order():
    m = Map()
    for position in [(-4.0, 2.0), (2.0, -3.0), (3.0, 3.0)]:
        m.append_landmark(position)
    assert [lm.id for lm in m.landmarks] == [0, 1, 2]
    assert m.landmarks[1] == Landmark(position=(2.0, -3.0), id=1)


def test_positions_shape(landmark_map):
    assert landmark_map.positions.shape == (3, 2)
    assert Map().positions.shape == (0, 2)


def test_map_is_frozen_once_attached_to_a_camera(landmark_map):
    IdealCamera(landmark_map)
    assert landmark_map.frozen
    with pytest.raises(RuntimeError):
        landmark_map.append_landmark((0.0, 0.0))
    assert len(landmark_map) == 3


def test_landmarks_are_immutable(landmark_map):
    with pytest.raises(AttributeError):
        landmark_map.landmarks[0].id = 7
