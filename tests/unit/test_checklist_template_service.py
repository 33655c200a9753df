"""Unit tests for checklist template service."""

import pytest
from unittest.mock import AsyncMock

from src.quality_inspection.application.services.checklist_template_service import ChecklistTemplateService
from src.quality_inspection.domain.entities.checklist_template import ChecklistTemplate


class TestChecklistTemplateService:
    """Test cases for ChecklistTemplateService."""

    def setup_mocks(self):
        """Set up mock repository for testing."""
        self.mock_template_repo = AsyncMock()
        self.mock_template_repo.save.side_effect = lambda template: template
        self.service = ChecklistTemplateService(self.mock_template_repo)

    @pytest.mark.asyncio
    async def test_list_active_templates(self, critical_template):
        """Test that only active templates are listed by default."""
        self.setup_mocks()
        self.mock_template_repo.find_active.return_value = [critical_template]

        result = await self.service.list_templates()

        assert result == [critical_template]
        self.mock_template_repo.find_all.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_all_templates(self):
        self.setup_mocks()
        self.mock_template_repo.find_all.return_value = []

        assert await self.service.list_templates(include_inactive=True) == []
        self.mock_template_repo.find_all.assert_called_once()

    @pytest.mark.asyncio
    async def test_get_template_not_found(self):
        self.setup_mocks()
        self.mock_template_repo.find_by_id.return_value = None

        with pytest.raises(LookupError, match="not found"):
            await self.service.get_template("missing")

    @pytest.mark.asyncio
    async def test_save_valid_template(self, two_section_template):
        """Test saving a valid template."""
        self.setup_mocks()

        saved = await self.service.save_template(two_section_template)

        assert saved == two_section_template
        self.mock_template_repo.save.assert_called_once_with(two_section_template)

    @pytest.mark.asyncio
    async def test_save_invalid_template(self):
        """Test that invalid templates are rejected before reaching the repository."""
        self.setup_mocks()
        template = ChecklistTemplate(name="")

        with pytest.raises(ValueError, match="Checklist name cannot be empty"):
            await self.service.save_template(template)

        self.mock_template_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_deactivate_template(self, critical_template):
        """Test deactivating a template."""
        self.setup_mocks()
        self.mock_template_repo.find_by_id.return_value = critical_template

        result = await self.service.set_active("safety-check", False)

        assert result.is_active is False
        self.mock_template_repo.save.assert_called_once()

    @pytest.mark.asyncio
    async def test_delete_template(self):
        self.setup_mocks()
        self.mock_template_repo.delete.return_value = False

        assert await self.service.delete_template("missing") is False
