from typing import List
from uuid import UUID

from app.core.exceptions import ConflictError
from app.core.permissions import list_scope
from app.models.company import Company
from app.models.user import User
from app.schemas.company import CompanyCreate, CompanyUpdate
from app.services.base import BaseService

COMPANY_NOT_FOUND = "Empresa não encontrada"


class CompanyService(BaseService):
    """Tenant administration. Mutations are admin-only at the router level."""

    def _ensure_name_free(self, name: str, exclude_id: UUID = None) -> None:
        query = self.db.query(Company).filter(Company.name == name)
        if exclude_id is not None:
            query = query.filter(Company.id != exclude_id)
        if query.first() is not None:
            raise ConflictError("Já existe uma empresa com este nome")

    def list_companies(self) -> List[Company]:
        company_id = list_scope(self.actor)
        query = self.db.query(Company)
        if company_id is not None:
            query = query.filter(Company.id == company_id)
        return query.order_by(Company.name).all()

    def get_company(self, company_id: UUID) -> Company:
        return self._get_or_404(Company, company_id, COMPANY_NOT_FOUND)

    def create_company(self, data: CompanyCreate) -> Company:
        self._ensure_name_free(data.name)
        company = Company(name=data.name, description=data.description, is_active=True)
        self.db.add(company)
        self._commit("criar empresa")
        self.db.refresh(company)
        self._logger.info(f"Company {company.id} created")
        return company

    def update_company(self, company_id: UUID, patch: CompanyUpdate) -> Company:
        changes = patch.changes()
        company = self.get_company(company_id)
        if "name" in changes:
            self._ensure_name_free(changes["name"], exclude_id=company.id)
        self._apply_patch(company, changes)
        self._commit("atualizar empresa")
        self.db.refresh(company)
        self._logger.info(f"Company {company.id} updated: {sorted(changes)}")
        return company

    def delete_company(self, company_id: UUID) -> None:
        company = self.get_company(company_id)
        user_count = self.db.query(User).filter(User.company_id == company.id).count()
        if user_count > 0:
            raise ConflictError(
                f"Não é possível excluir a empresa: {user_count} usuário(s) associado(s)"
            )
        self.db.delete(company)
        self._commit("excluir empresa")
        self._logger.warning(f"Company {company_id} deleted")
