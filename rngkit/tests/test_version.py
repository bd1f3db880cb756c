import re

from rngkit import __version__
from rngkit.version import GitInfo, pep440_from_git


def test_version_is_pep440_like():
    assert re.match(r"^\d+\.\d+\.\d+", __version__)


def test_exact_tag():
    assert pep440_from_git(GitInfo("1.2.3", 0, "abc1234", False)) == "1.2.3"


def test_distance_and_dirty():
    assert pep440_from_git(GitInfo("1.2.3", 4, "abc1234", False)) == "1.2.3.post4+gabc1234"
    assert pep440_from_git(GitInfo("1.2.3", 0, "abc1234", True)) == "1.2.3.post0+gabc1234.dirty"
