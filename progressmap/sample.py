"""
샘플 제품 구조입니다.
서버 시작 시(load_sample_data=True) 또는 보고서 스크립트에서 입력 파일이 없을 때 사용합니다.
완료율은 로드 시 하위 항목 기준으로 다시 계산됩니다.
"""

from progressmap.models import Product


SAMPLE_STRUCTURE = {
    "id": "product-1",
    "name": "agentful",
    "completion": 75,
    "description": "Autonomous product development framework with specialized AI agents",
    "domains": [
        {
            "id": "domain-1",
            "name": "Agent System",
            "completion": 90,
            "description": "Core agent orchestration and delegation system",
            "features": [
                {
                    "id": "feature-1",
                    "name": "Orchestrator Agent",
                    "completion": 100,
                    "priority": "CRITICAL",
                    "description": "Central coordinator managing all specialist agents",
                    "subtasks": [
                        {"id": "sub-1", "name": "Task delegation", "completion": 100},
                        {"id": "sub-2", "name": "State management", "completion": 100},
                        {"id": "sub-3", "name": "Progress tracking", "completion": 100},
                    ],
                },
                {
                    "id": "feature-2",
                    "name": "Specialist Agents",
                    "completion": 80,
                    "priority": "HIGH",
                    "description": "Domain-specific agents for focused development tasks",
                    "dependencies": ["feature-1"],
                    "subtasks": [
                        {"id": "sub-4", "name": "Backend agent", "completion": 100},
                        {"id": "sub-5", "name": "Frontend agent", "completion": 90},
                        {"id": "sub-6", "name": "Tester agent", "completion": 70},
                        {"id": "sub-7", "name": "Reviewer agent", "completion": 60},
                    ],
                },
                {
                    "id": "feature-3",
                    "name": "Quality Gates",
                    "completion": 70,
                    "priority": "HIGH",
                    "description": "Automated validation and quality checks",
                    "dependencies": ["feature-2"],
                    "subtasks": [
                        {"id": "sub-8", "name": "Type checking", "completion": 100},
                        {"id": "sub-9", "name": "Test coverage", "completion": 80},
                        {"id": "sub-10", "name": "Security scanning", "completion": 30},
                    ],
                },
            ],
        },
        {
            "id": "domain-2",
            "name": "Documentation",
            "completion": 60,
            "description": "User guides and interactive visualizations",
            "features": [
                {
                    "id": "feature-4",
                    "name": "Interactive Visualizations",
                    "completion": 50,
                    "priority": "HIGH",
                    "description": "React Flow based visual components",
                    "subtasks": [
                        {"id": "sub-11", "name": "Agent Architecture Flow", "completion": 100},
                        {"id": "sub-12", "name": "Product Structure Visualizer", "completion": 0},
                        {"id": "sub-13", "name": "Progress Dashboard", "completion": 0},
                    ],
                },
                {
                    "id": "feature-5",
                    "name": "API Reference",
                    "completion": 70,
                    "priority": "MEDIUM",
                    "description": "Comprehensive API documentation",
                    "subtasks": [
                        {"id": "sub-14", "name": "Core APIs", "completion": 90},
                        {"id": "sub-15", "name": "CLI Commands", "completion": 50},
                    ],
                },
            ],
        },
        {
            "id": "domain-3",
            "name": "Developer Experience",
            "completion": 75,
            "description": "Tools and configuration for better DX",
            "features": [
                {
                    "id": "feature-6",
                    "name": "Web Configurator",
                    "completion": 80,
                    "priority": "CRITICAL",
                    "description": "Interactive setup and configuration tool",
                    "subtasks": [
                        {"id": "sub-16", "name": "Component selector", "completion": 100},
                        {"id": "sub-17", "name": "Preset manager", "completion": 90},
                        {"id": "sub-18", "name": "Export functionality", "completion": 50},
                    ],
                },
                {
                    "id": "feature-7",
                    "name": "CLI Presets",
                    "completion": 70,
                    "priority": "HIGH",
                    "description": "Pre-configured installation profiles",
                    "dependencies": ["feature-6"],
                    "subtasks": [
                        {"id": "sub-19", "name": "Minimal preset", "completion": 100},
                        {"id": "sub-20", "name": "Full preset", "completion": 80},
                        {"id": "sub-21", "name": "Custom preset support", "completion": 30},
                    ],
                },
            ],
        },
    ],
}


def load_sample_product() -> Product:
    """샘플 구조를 Product 모델로 반환합니다."""
    return Product.model_validate(SAMPLE_STRUCTURE)
