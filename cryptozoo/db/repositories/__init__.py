from cryptozoo.db.repositories.vertices import VertexRepository
from cryptozoo.db.repositories.edges import EdgeRepository
from cryptozoo.db.repositories.edit_requests import EditRequestRepository
from cryptozoo.db.repositories.users import UserRepository

__all__ = ['VertexRepository', 'EdgeRepository', 'EditRequestRepository', 'UserRepository']
