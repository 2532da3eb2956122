import pytest


@pytest.fixture
def straight_line():
    # Längs ekvatorn, ca 5.56 km i 50 steg
    return [(0.0, i * 0.001) for i in range(51)]
