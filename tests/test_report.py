from io import StringIO

import pytest
from rich.console import Console

from vitrine.report import AggregateReport, CATEGORY_LABELS, ReportCategory


@pytest.mark.unit
def test_every_category_has_a_label():
    assert set(CATEGORY_LABELS) == set(ReportCategory)


@pytest.mark.unit
def test_record_counts_and_lists_games_once(make_game):
    report = AggregateReport()
    game = make_game()

    report.record(ReportCategory.MISSING_ROMS, game, 2)
    report.record(ReportCategory.MISSING_ROMS, game)
    report.record(ReportCategory.MISSING_GENRE_IMAGES)

    assert report.count(ReportCategory.MISSING_ROMS) == 3
    assert report.affected(ReportCategory.MISSING_ROMS) == [game]
    assert report.count(ReportCategory.MISSING_GENRE_IMAGES) == 1
    assert report.affected(ReportCategory.MISSING_GENRE_IMAGES) == []
    assert report.count(ReportCategory.SKIPPED_GAMES) == 0


@pytest.mark.unit
def test_merge_game_reports(make_game):
    pacman = make_game()
    doom = make_game(name='doom', description='Doom', system='dosbox', genre='Shooter')

    run = AggregateReport()
    for game in (pacman, doom):
        game_report = AggregateReport()
        game_report.record(ReportCategory.MISSING_LOGOS, game)
        game_report.mark_published(game)
        run.merge(game_report)

    assert run.count(ReportCategory.MISSING_LOGOS) == 2
    assert run.affected(ReportCategory.MISSING_LOGOS) == [pacman, doom]
    assert run.published == [pacman, doom]
    assert list(run.genres_used) == ['Maze', 'Action', 'Shooter']
    assert list(run.systems_used) == ['mame', 'dosbox']


@pytest.mark.unit
def test_render_summary_lists_non_zero_categories(make_game):
    report = AggregateReport()
    report.record(ReportCategory.SKIPPED_GAMES, make_game())
    report.record(ReportCategory.DEFAULT_BACKGROUNDS, make_game(name='galaga'))

    output = StringIO()
    table = report.render_summary(Console(file=output, width=120))

    text = output.getvalue()
    assert table.row_count == 2
    assert 'Published 0 game(s)' in text
    assert 'Skipped games' in text
    assert 'Games using the system background' in text
    assert 'Missing logos' not in text
