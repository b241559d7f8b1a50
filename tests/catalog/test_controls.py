import pytest

from vitrine.catalog.controls import normalize_button_directions


@pytest.mark.unit
def test_rotate_buttons_become_directions(make_game):
    game = make_game(
        name='asteroid',
        buttonLabels=['Rotate Left', 'Rotate Right', 'Fire', 'Thrust'],
        controls={'1': {'type': 'only_buttons'}},
    )

    assert normalize_button_directions(game)

    player1 = game.controls['1']
    assert game.button_labels == ['Fire', 'Thrust']
    assert player1['ways'] == 2
    assert player1['directions'] == ['left', 'right']
    assert player1['buttons'] == player1['numberOfButtons'] == 4


@pytest.mark.unit
def test_pedal_up_down_becomes_directions(make_game):
    game = make_game(
        name='llander',
        buttonLabels=['Thrust Up', 'Thrust Down', 'Abort'],
        controls={'1': {'type': 'pedal'}},
    )

    assert normalize_button_directions(game)
    assert game.controls['1']['directions'] == ['up', 'down']
    assert game.button_labels == ['Abort']


@pytest.mark.unit
def test_joystick_games_untouched(make_game):
    game = make_game(
        buttonLabels=['Left', 'Right'],
        controls={'1': {'type': 'joy', 'ways': 4}},
    )

    assert not normalize_button_directions(game)
    assert game.button_labels == ['Left', 'Right']
    assert game.controls['1'] == {'type': 'joy', 'ways': 4}


@pytest.mark.unit
def test_games_without_controls_untouched(make_game):
    assert not normalize_button_directions(make_game())
