from champion_draft.domain.role import Role

# Bundled pools, used until the backend's champion-role configuration has been loaded.
CHAMPION_POOLS: dict[Role, tuple[str, ...]] = {
    Role.TOP: (
        "Ambessa", "Camille", "Cho'Gath", "Darius", "Dr. Mundo", "Fiora", "Gangplank", "Garen", "Gnar",
        "Gragas", "Gwen", "Heimerdinger", "Illaoi", "Irelia", "Jax", "Jayce", "Kayle", "Kennen", "Kled",
        "K'Sante", "Malphite", "Mordekaiser", "Nasus", "Olaf", "Ornn", "Poppy", "Quinn", "Renekton", "Riven",
        "Rumble", "Sett", "Shen", "Singed", "Sion", "Tahm Kench", "Teemo", "Tryndamere", "Urgot", "Vayne",
        "Vladimir", "Warwick", "Yone", "Yorick",
    ),
    Role.JUNGLE: (
        "Amumu", "Bel'Veth", "Briar", "Elise", "Evelynn", "Fiddlesticks", "Graves", "Hecarim", "Ivern",
        "Jarvan IV", "Karthus", "Kayn", "Kha'Zix", "Kindred", "Lee Sin", "Lillia", "Maokai", "Master Yi",
        "Nidalee", "Nocturne", "Nunu & Willump", "Pantheon", "Qiyana", "Rammus", "Rek'Sai", "Rengar",
        "Sejuani", "Shaco", "Shyvana", "Skarner", "Trundle", "Udyr", "Vi", "Viego", "Volibear", "Wukong",
        "Xin Zhao", "Zac",
    ),
    Role.MID: (
        "Ahri", "Akali", "Akshan", "Anivia", "Annie", "Aurelion Sol", "Aurora", "Azir", "Brand", "Cassiopeia",
        "Diana", "Ekko", "Fizz", "Galio", "Hwei", "Kassadin", "Katarina", "LeBlanc", "Lissandra", "Lux",
        "Malzahar", "Morgana", "Naafiri", "Orianna", "Ryze", "Swain", "Sylas", "Syndra", "Taliyah", "Talon",
        "Twisted Fate", "Veigar", "Vex", "Viktor", "Xerath", "Yasuo", "Zed", "Ziggs", "Zoe",
    ),
    Role.ADC: (
        "Aphelios", "Ashe", "Caitlyn", "Corki", "Draven", "Ezreal", "Jhin", "Jinx", "Kai'Sa", "Kalista",
        "Kog'Maw", "Lucian", "Miss Fortune", "Nilah", "Samira", "Seraphine", "Sivir", "Smolder", "Tristana",
        "Twitch", "Varus", "Xayah", "Zeri", "Yunara",
    ),
    Role.SUPPORT: (
        "Alistar", "Bard", "Blitzcrank", "Braum", "Janna", "Karma", "Leona", "Lulu", "Milio", "Nami",
        "Nautilus", "Neeko", "Pyke", "Rakan", "Rell", "Renata Glasc", "Senna", "Sona", "Soraka", "Taric",
        "Thresh", "Vel'Koz", "Yuumi", "Zilean", "Zyra", "Mel",
    ),
}
