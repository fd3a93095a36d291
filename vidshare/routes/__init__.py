from vidshare.routes.videos import videos_bp
from vidshare.routes.auth import auth_bp
