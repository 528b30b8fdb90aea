import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from edu_calc.main import app
from edu_calc.calculation.calculators.strategy_registry import initialize_calculation_system
from edu_calc.calculation.engine import NOT_IMPLEMENTED_TEXT


@pytest.fixture
def client():
    """Test client fixture"""
    return TestClient(app)


@pytest.fixture
def force_request():
    """Solve request for Newton's second law"""
    return {
        "calculator_id": "Force Calculator (Newton's 2nd Law)",
        "fields": {"mass": 10, "acceleration": 2}
    }


class TestServiceEndpoints:
    """Test root and health endpoints"""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {
            "message": "Education Calculator Service",
            "version": "1.0.0",
            "status": "running"
        }

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "calculators": 60}

    def test_startup_loads_catalogue(self):
        """Test the lifespan hook loads calculators before serving"""
        with patch('edu_calc.main.initialize_calculation_system', wraps=initialize_calculation_system) as mock_init:
            with TestClient(app) as started_client:
                mock_init.assert_called_once()
                response = started_client.get("/health")

        assert response.json()["calculators"] == 60

    def test_health_without_calculators(self, client):
        """Test an empty catalogue reports degraded"""
        with patch('edu_calc.main.get_calculation_engine') as mock_engine:
            mock_engine.return_value.get_registered_strategies.return_value = []

            response = client.get("/health")

            assert response.status_code == 200
            assert response.json() == {"status": "degraded", "calculators": 0}


class TestCalculatorCatalog:
    """Test calculator listing endpoints"""

    def test_list_calculators(self, client):
        """Test listing every registered calculator"""
        response = client.get("/api/v1/calculators")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 60
        assert set(data[0].keys()) == {"name", "category", "description"}

    def test_list_calculators_by_category(self, client):
        """Test category filter is case insensitive"""
        response = client.get("/api/v1/calculators", params={"category": "physics"})

        assert response.status_code == 200
        data = response.json()
        assert data
        assert all(item["category"] == "Physics" for item in data)
        assert "Ohm's Law Calculator" in [item["name"] for item in data]

    def test_list_categories(self, client):
        response = client.get("/api/v1/calculators/categories")

        assert response.status_code == 200
        categories = response.json()
        for category in ("Algebra", "Calculus", "Geometry", "Statistics", "Finance", "Physics"):
            assert category in categories
        assert len(categories) == len(set(categories))

    def test_get_calculator(self, client):
        """Test calculator detail for an id containing spaces and slashes"""
        response = client.get("/api/v1/calculators/Eigenvalue/Eigenvector")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Eigenvalue/Eigenvector"
        assert data["category"] == "Matrix"
        assert "m_00" in data["fields"]

    def test_get_calculator_not_found(self, client):
        response = client.get("/api/v1/calculators/Flux Capacitor")
        assert response.status_code == 404


class TestSolveEndpoint:
    """Test the solve endpoint"""

    def test_solve_success(self, client, force_request):
        response = client.post("/api/v1/calculators/solve", json=force_request)

        assert response.status_code == 200
        data = response.json()
        assert data["text"] == "F = ma = 10 × 2 = 20.0000 N"
        assert isinstance(data["steps"], list)
        assert "plotData" not in data

    def test_solve_with_plot(self, client):
        """Test chart payload is returned under plotData"""
        response = client.post("/api/v1/calculators/solve", json={
            "calculator_id": "Binomial Distribution",
            "fields": {"n": 4, "p": 0.5, "k": 2}
        })

        assert response.status_code == 200
        plot = response.json()["plotData"]
        assert plot["type"] == "bar"
        assert plot["data"]["labels"] == [0, 1, 2, 3, 4]

    def test_solve_validation_message(self, client):
        """Test bad field values come back as result text"""
        response = client.post("/api/v1/calculators/solve", json={
            "calculator_id": "Density Calculator",
            "fields": {"mass": 10, "volume": 0}
        })

        assert response.status_code == 200
        assert response.json() == {"text": "Error: Volume cannot be zero."}

    def test_solve_unknown_calculator(self, client):
        response = client.post("/api/v1/calculators/solve", json={"calculator_id": "Flux Capacitor"})

        assert response.status_code == 200
        assert response.json()["text"] == NOT_IMPLEMENTED_TEXT

    def test_solve_empty_calculator_id(self, client):
        response = client.post("/api/v1/calculators/solve", json={"calculator_id": "", "fields": {}})
        assert response.status_code == 422

    def test_solve_service_failure(self, client, force_request):
        """Test unexpected service failures map to 500"""
        with patch('edu_calc.api.calculation_api.CalculationService') as mock_service:
            mock_service.return_value.solve.side_effect = RuntimeError("engine unavailable")

            response = client.post("/api/v1/calculators/solve", json=force_request)

            assert response.status_code == 500
            assert response.json()["detail"] == "engine unavailable"


class TestPerformanceStats:

    def test_stats_after_solve(self, client, force_request):
        client.post("/api/v1/calculators/solve", json=force_request)

        response = client.get("/api/v1/calculators/stats/performance")

        assert response.status_code == 200
        data = response.json()
        assert data["total_operations"] >= 1
        assert 0.0 <= data["success_rate"] <= 1.0

    def test_stats_without_calculations(self, client):
        """Test empty stats fall back to zero defaults"""
        with patch('edu_calc.api.calculation_api.CalculationService') as mock_service:
            mock_service.return_value.get_performance_stats.return_value = {}

            response = client.get("/api/v1/calculators/stats/performance")

            assert response.status_code == 200
            assert response.json()["total_operations"] == 0
